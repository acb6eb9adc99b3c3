"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_edge, make_pool_info

    edge = make_edge("p1", TOKEN_A, TOKEN_B, tvl=1000)
"""

from decimal import Decimal
from typing import Any

from clmm.models import PoolInfo, TokenInfo
from clmm.routing.types import PoolEdge
from tests.helpers.constants import SQRT_PRICE_ONE, TOKEN_A, TOKEN_B, TOKEN_DECIMALS


def make_edge(
    pool_id: str,
    token_x: str = TOKEN_A,
    token_y: str = TOKEN_B,
    tvl: int | str | Decimal = 1000,
) -> PoolEdge:
    """Create a graph edge for a pool."""
    return PoolEdge(pool_id=pool_id, token_x=token_x, token_y=token_y, tvl=Decimal(tvl))


def make_pool_info(
    pool_id: str = "0x01",
    token_x: str = TOKEN_A,
    token_y: str = TOKEN_B,
    tvl: int | str = 1000,
    current_sqrt_price: int = SQRT_PRICE_ONE,
    current_tick_index: int = 0,
    liquidity: int = 10**12,
    **extra: Any,
) -> PoolInfo:
    """Create a PoolInfo the way the pool API serves it (camelCase, strings).

    Args:
        pool_id: Pool object id
        token_x: Token X coin type
        token_y: Token Y coin type
        tvl: Pool TVL in USD
        current_sqrt_price: Q64.64 sqrt price (default: price 1)
        current_tick_index: Tick matching current_sqrt_price
        liquidity: Active liquidity
        **extra: Any other API fields, by their camelCase name

    Returns:
        Validated PoolInfo
    """
    payload: dict[str, Any] = {
        "poolId": pool_id,
        "tokenXType": token_x,
        "tokenYType": token_y,
        "tvl": str(tvl),
        "currentSqrtPrice": str(current_sqrt_price),
        "currentTickIndex": str(current_tick_index),
        "liquidity": str(liquidity),
        "tickSpacing": 1,
    }
    payload.update(extra)
    return PoolInfo.model_validate(payload)


def make_token_info(coin_type: str, price: str | None = "1", decimals: int | None = None) -> TokenInfo:
    """Create TokenInfo with decimals from TOKEN_DECIMALS unless given."""
    if decimals is None:
        decimals = TOKEN_DECIMALS.get(coin_type, 9)
    return TokenInfo.model_validate({"coinType": coin_type, "decimals": decimals, "price": price})
