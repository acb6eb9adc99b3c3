"""Multi-hop route discovery and dry-run route selection."""

from clmm.routing.pathfinding import PathFinder, TokenGraph, sort_paths
from clmm.routing.router import RouteSelector, pool_edges
from clmm.routing.simulator import HttpSwapSimulator, MockSwapSimulator, SwapSimulator
from clmm.routing.types import PathCandidate, PoolEdge, RouteResult, SwapStep

__all__ = [
    # Types
    "PoolEdge",
    "SwapStep",
    "PathCandidate",
    "RouteResult",
    # Pathfinding
    "TokenGraph",
    "PathFinder",
    "sort_paths",
    # Simulation
    "SwapSimulator",
    "MockSwapSimulator",
    "HttpSwapSimulator",
    # Selection
    "RouteSelector",
    "pool_edges",
]
