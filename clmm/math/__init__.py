"""Fixed-point, tick and liquidity math for concentrated-liquidity pools."""

from clmm.math.fixed_point import (
    mul_div_ceil,
    mul_div_floor,
    mul_div_round,
    shift_right_round_up,
)
from clmm.math.liquidity import (
    CoinAmounts,
    LiquidityInput,
    PositionStatus,
    est_liquidity_and_coin_amounts_from_one_amount,
    estimate_liquidity_for_coin_a,
    estimate_liquidity_for_coin_b,
    get_coin_amounts_from_liquidity,
    get_position_status,
)
from clmm.math.tick_math import (
    price_to_sqrt_price_x64,
    sqrt_price_x64_to_price,
    sqrt_price_x64_to_tick_index,
    tick_index_to_sqrt_price_x64,
)

__all__ = [
    # Fixed point
    "mul_div_floor",
    "mul_div_ceil",
    "mul_div_round",
    "shift_right_round_up",
    # Tick math
    "tick_index_to_sqrt_price_x64",
    "sqrt_price_x64_to_tick_index",
    "price_to_sqrt_price_x64",
    "sqrt_price_x64_to_price",
    # Liquidity
    "CoinAmounts",
    "LiquidityInput",
    "PositionStatus",
    "get_coin_amounts_from_liquidity",
    "estimate_liquidity_for_coin_a",
    "estimate_liquidity_for_coin_b",
    "est_liquidity_and_coin_amounts_from_one_amount",
    "get_position_status",
]
