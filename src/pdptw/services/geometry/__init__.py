"""Route geometry: cache, routing provider client and resolver."""

from .cache import CacheStats, GeometryCache, edge_key, full_route_key
from .osrm_client import OSRMClient, ProviderRoute
from .resolver import (
    ResolutionPass,
    ResolutionResult,
    ResolutionWarning,
    RouteGeometryResolver,
    RoutingMode,
)

__all__ = [
    "CacheStats",
    "GeometryCache",
    "OSRMClient",
    "ProviderRoute",
    "ResolutionPass",
    "ResolutionResult",
    "ResolutionWarning",
    "RouteGeometryResolver",
    "RoutingMode",
    "edge_key",
    "full_route_key",
]
