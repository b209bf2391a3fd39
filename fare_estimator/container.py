"""Wiring of ports, adapters and services.

A small registry keyed by type: `create_default` binds Nominatim, OSRM and
the CSV fare repository behind their ports, builds the resolvers on top and
hands out one FareEstimationService. Components are created on first
resolve from a single validated configuration snapshot.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config
from .domain.errors import ConfigurationError


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        service = container.resolve(FareEstimationService)

        # Testing
        container = Container()
        container.register(RoutingProviderPort, lambda: FakeRouter())
        router = container.resolve(RoutingProviderPort)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            self._singletons.pop(port_type, None)
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def clear_all(self) -> None:
        """Clear all registrations and singletons."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    async def aclose(self) -> None:
        """Release network clients and pending debounced work."""
        from .adapters.routing import OSRMRoutingAdapter
        from .ports.routing import RoutingProviderPort
        from .services import DebounceScheduler

        with self._lock:
            router = self._singletons.get(RoutingProviderPort)
            scheduler = self._singletons.get(DebounceScheduler)
        if scheduler is not None:
            scheduler.shutdown()
        if isinstance(router, OSRMRoutingAdapter):
            await router.aclose()

    @staticmethod
    def validate(config: AppConfig) -> None:
        """Reject settings no component can work with.

        Raises:
            ConfigurationError: On the first invalid setting.
        """
        if not config.geocoding.user_agent.strip():
            raise ConfigurationError(
                "Geocoding requires an identifying user agent",
                setting_name="geocoding.user_agent",
                expected_type="non-empty string",
            )
        if config.geocoding.debounce_ms < 0:
            raise ConfigurationError(
                "Debounce delay must not be negative",
                setting_name="geocoding.debounce_ms",
                expected_type="int >= 0",
            )
        for name, value in (
            ("geocoding.timeout_seconds", config.geocoding.timeout_seconds),
            ("routing.timeout_seconds", config.routing.timeout_seconds),
        ):
            if value <= 0:
                raise ConfigurationError(
                    "Timeouts must be positive",
                    setting_name=name,
                    expected_type="number > 0",
                )
        if not config.routing.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Invalid routing URL: {config.routing.base_url!r}",
                setting_name="routing.base_url",
                expected_type="http(s) URL",
            )

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        from .adapters.cache import InMemoryCache
        from .adapters.fares import CSVFareRepository
        from .adapters.geocoding import NominatimPlaceSearchAdapter
        from .adapters.routing import OSRMRoutingAdapter
        from .ports.fares import FareSourcePort
        from .ports.geocoding import PlaceSearchPort
        from .ports.routing import RoutingProviderPort
        from .services import (
            DebounceScheduler,
            FareEstimationService,
            GeocodingResolver,
            RoutingResolver,
        )

        config = config or get_config()
        cls.validate(config)
        container = cls(config=config)

        # Geocoding
        container.register(
            PlaceSearchPort,
            lambda: NominatimPlaceSearchAdapter(config.geocoding),
        )
        container.register(DebounceScheduler, DebounceScheduler)
        container.register(
            GeocodingResolver,
            lambda: GeocodingResolver(
                provider=container.resolve(PlaceSearchPort),
                scheduler=container.resolve(DebounceScheduler),
                config=config.geocoding,
                cache=InMemoryCache(
                    name="geocode",
                    default_ttl_seconds=config.geocoding.cache_ttl_seconds,
                    max_size=512,
                ),
            ),
        )

        # Routing
        container.register(
            RoutingProviderPort,
            lambda: OSRMRoutingAdapter(config.routing),
        )
        container.register(
            RoutingResolver,
            lambda: RoutingResolver(
                provider=container.resolve(RoutingProviderPort),
                config=config.routing,
                cache=InMemoryCache(
                    name="routes",
                    default_ttl_seconds=config.routing.cache_ttl_seconds,
                    max_size=256,
                ),
            ),
        )

        # Fares
        container.register(
            FareSourcePort,
            lambda: CSVFareRepository(config.data),
        )

        # Main service
        def create_estimation_service() -> FareEstimationService:
            return FareEstimationService(
                geocoder=container.resolve(GeocodingResolver),
                router=container.resolve(RoutingResolver),
                fares=container.resolve(FareSourcePort),
                policy=config.policy,
            )

        container.register(FareEstimationService, create_estimation_service)

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get the default application container.

    Returns:
        The default Container instance (creates one if needed).
    """
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Reset the default container.

    Call this in tests to ensure a fresh container.
    """
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
