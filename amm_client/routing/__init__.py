"""Multi-hop routing.

Module structure:
- types.py: RouteHop, Route and BuiltRoute dataclasses
- multihop.py: MultihopRouteBuilder (chained quotes, account layout, slippage gate)
- pathfinding.py: TokenGraph and PathFinder for route discovery
"""

from amm_client.routing.multihop import MultihopRouteBuilder, default_route_builder
from amm_client.routing.pathfinding import PathFinder, TokenGraph
from amm_client.routing.types import BuiltRoute, Route, RouteHop

__all__ = [
    "BuiltRoute",
    "MultihopRouteBuilder",
    "PathFinder",
    "Route",
    "RouteHop",
    "TokenGraph",
    "default_route_builder",
]
