"""Pydantic models for pool data API payloads."""

from clmm.models.pool import PoolInfo, Rewarder, RewardersApy, TickLiquidity, TokenInfo
from clmm.models.types import CoinType, TickIndex, Uint64, Uint128

__all__ = [
    # Types
    "CoinType",
    "TickIndex",
    "Uint64",
    "Uint128",
    # Pool API models
    "PoolInfo",
    "Rewarder",
    "RewardersApy",
    "TickLiquidity",
    "TokenInfo",
]
