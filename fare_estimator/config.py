"""Centralized configuration using Pydantic Settings.

Settings are read once into an immutable snapshot by `get_config()` before
any component is built, so nothing reads a flag before it has been loaded.

Configuration can be overridden via environment variables:
- FARE_GEO_COUNTRY_CODES=ph
- FARE_GEO_USER_AGENT=my-fare-app/1.0
- FARE_ROUTING_BASE_URL=http://localhost:5000
- FARE_DATA_DATA_DIR=/path/to/data
- FARE_POLICY_PROVINCIAL=true
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeocodingConfig(BaseSettings):
    """Place lookup configuration.

    Environment variables prefixed with FARE_GEO_.
    """

    model_config = SettingsConfigDict(env_prefix="FARE_GEO_", frozen=True)

    # Nominatim's usage policy requires an identifying User-Agent.
    user_agent: str = "fare-estimator"
    domain: str = "nominatim.openstreetmap.org"
    timeout_seconds: int = 10
    rate_limit_delay: float = 1.0
    max_retries: int = 0
    error_wait_seconds: float = 2.0
    debounce_ms: int = 800
    country_codes: Optional[str] = "ph"
    language: str = "en"
    limit: int = 5
    cache_ttl_seconds: float = 3600.0


class RoutingConfig(BaseSettings):
    """Road routing configuration.

    Environment variables prefixed with FARE_ROUTING_.
    """

    model_config = SettingsConfigDict(env_prefix="FARE_ROUTING_", frozen=True)

    base_url: str = "https://router.project-osrm.org"
    profile: str = "driving"
    timeout_seconds: float = 15.0
    cache_ttl_seconds: float = 900.0


class FareDataConfig(BaseSettings):
    """Fare reference data configuration.

    Environment variables prefixed with FARE_DATA_.
    """

    model_config = SettingsConfigDict(env_prefix="FARE_DATA_", frozen=True)

    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent / "data"
    )
    formulas_file: str = "fare_formulas.csv"
    fixed_fares_dir: str = "fixed_fares"

    @property
    def formulas_path(self) -> Path:
        """Full path to the fare formula CSV file."""
        return self.data_dir / self.formulas_file

    @property
    def fixed_fares_path(self) -> Path:
        """Directory holding one CSV file per fixed-fare table."""
        return self.data_dir / self.fixed_fares_dir


class FarePolicyConfig(BaseSettings):
    """Pricing policy flags.

    Environment variables prefixed with FARE_POLICY_.
    """

    model_config = SettingsConfigDict(env_prefix="FARE_POLICY_", frozen=True)

    provincial: bool = False


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with FARE_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="FARE_LOG_", frozen=True)

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.geocoding.debounce_ms)
        print(config.data.formulas_path)

    Environment variables prefixed with FARE_.
    """

    model_config = SettingsConfigDict(env_prefix="FARE_", frozen=True)

    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    data: FareDataConfig = Field(default_factory=FareDataConfig)
    policy: FarePolicyConfig = Field(default_factory=FarePolicyConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @property
    def project_root(self) -> Path:
        """Return the project root directory."""
        return Path(__file__).resolve().parent.parent


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
