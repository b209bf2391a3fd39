"""Routing adapters - Implementations of RoutingProviderPort.

Available implementations:
- OSRMRoutingAdapter: Road routing through an OSRM HTTP server
"""

from .osrm_adapter import OSRMRoutingAdapter, parse_route_payload

__all__ = ["OSRMRoutingAdapter", "parse_route_payload"]
