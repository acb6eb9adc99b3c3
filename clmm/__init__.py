"""Concentrated-liquidity math and multi-hop route selection."""

from clmm.routing import RouteSelector

__version__ = "0.1.0"
__all__ = ["RouteSelector", "__version__"]
