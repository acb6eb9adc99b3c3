"""Type definitions for routing module."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PoolEdge:
    """A tradable pool between two tokens.

    The graph treats it as undirected; the swap direction of a hop is
    derived from which side the hop enters on.
    """

    pool_id: str
    token_x: str
    token_y: str
    tvl: Decimal

    @property
    def weight(self) -> float:
        """Traversal weight ``1 / log(tvl + 1)``; grows as TVL shrinks.

        ``log1p`` keeps dust TVL finite, where ``log(tvl + 1)`` rounds to zero.
        """
        tvl = float(self.tvl)
        if tvl <= 0:
            return math.inf
        return 1 / math.log1p(tvl)

    def other(self, token: str) -> str:
        """Token on the opposite side of ``token``."""
        if token == self.token_x:
            return self.token_y
        if token == self.token_y:
            return self.token_x
        raise ValueError(f"Token {token} is not in pool {self.pool_id}")


@dataclass(frozen=True)
class SwapStep:
    """One hop of a route: the pool traversed and the swap direction."""

    pool_id: str
    token_x: str
    token_y: str
    is_x_to_y: bool

    @property
    def token_in(self) -> str:
        return self.token_x if self.is_x_to_y else self.token_y

    @property
    def token_out(self) -> str:
        return self.token_y if self.is_x_to_y else self.token_x


@dataclass(frozen=True)
class PathCandidate:
    """A simple path between two tokens with the pool chosen at each hop."""

    tokens: tuple[str, ...]
    steps: tuple[SwapStep, ...]
    weight: float

    @property
    def hops(self) -> int:
        return len(self.steps)

    @property
    def pool_ids(self) -> list[str]:
        return [step.pool_id for step in self.steps]


@dataclass
class RouteResult:
    """Best route found for a swap."""

    pool_path: list[str]
    output_amount: int
    tokens: list[str] | None = None  # None when source == target

    @property
    def is_multihop(self) -> bool:
        return len(self.pool_path) > 1


__all__ = ["PoolEdge", "SwapStep", "PathCandidate", "RouteResult"]
