"""Pool data access and coin type helpers."""

from clmm.pools.client import TICK_LIQUIDITY_PAGE_SIZE, PoolDataClient
from clmm.pools.coins import format_coin_type, is_sui_coin, normalize_struct_tag

__all__ = [
    "PoolDataClient",
    "TICK_LIQUIDITY_PAGE_SIZE",
    "format_coin_type",
    "is_sui_coin",
    "normalize_struct_tag",
]
