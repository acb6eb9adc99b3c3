"""Liquidity <-> token amount math for concentrated-liquidity positions.

For a position over ``[lower, upper]`` (Q64.64 sqrt prices) holding
liquidity ``L`` while the pool sits at sqrt price ``current``:

- below the range (current < lower), the position holds only token A:
  ``A = L * 2^64 * (upper - lower) / (lower * upper)``
- inside the range it holds both:
  ``A = L * 2^64 * (upper - current) / (current * upper)``,
  ``B = L * (current - lower) / 2^64``
- above the range it holds only token B:
  ``B = L * (upper - lower) / 2^64``

All amounts are computed with exact integer arithmetic; the caller picks
one rounding direction which is applied to both outputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from enum import Enum

from clmm.errors import InvalidRangeForSingleSidedEstimate, MathError, MathErrorCode
from clmm.math.fixed_point import check_div_round_up_if, d
from clmm.math.tick_math import (
    price_to_sqrt_price_x64,
    sqrt_price_x64_to_price,
    sqrt_price_x64_to_tick_index,
    tick_index_to_sqrt_price_x64,
)

__all__ = [
    "CoinAmounts",
    "LiquidityInput",
    "PositionStatus",
    "get_coin_amounts_from_liquidity",
    "estimate_liquidity_for_coin_a",
    "estimate_liquidity_for_coin_b",
    "est_liquidity_and_coin_amounts_from_one_amount",
    "get_position_status",
    "get_limit_sqrt_price_using_slippage",
]


@dataclass(frozen=True)
class CoinAmounts:
    """Token amounts (base units) backing a liquidity amount."""

    coin_a: int
    coin_b: int


@dataclass(frozen=True)
class LiquidityInput:
    """Two-sided deposit derived from a single-token amount.

    Attributes:
        coin_amount_a: Token A required for ``liquidity_amount``
        coin_amount_b: Token B required for ``liquidity_amount``
        token_max_a: Token A bound after slippage
        token_max_b: Token B bound after slippage
        liquidity_amount: Liquidity the fixed token amount buys
        fix_amount_a: True if token A was the fixed input
    """

    coin_amount_a: int
    coin_amount_b: int
    token_max_a: int
    token_max_b: int
    liquidity_amount: int
    fix_amount_a: bool


class PositionStatus(str, Enum):
    """Where the pool price sits relative to a position's range."""

    BELOW_RANGE = "below_range"
    IN_RANGE = "in_range"
    ABOVE_RANGE = "above_range"


def get_coin_amounts_from_liquidity(
    liquidity: int,
    current_sqrt_price: int,
    lower_sqrt_price: int,
    upper_sqrt_price: int,
    round_up: bool,
) -> CoinAmounts:
    """Compute the token amounts backing ``liquidity`` at the current price.

    Args:
        liquidity: Position liquidity
        current_sqrt_price: Pool sqrt price (Q64.64)
        lower_sqrt_price: Lower bound sqrt price (Q64.64)
        upper_sqrt_price: Upper bound sqrt price (Q64.64)
        round_up: Round both amounts up (deposits) instead of down (withdrawals)

    Raises:
        MathError: If lower_sqrt_price > upper_sqrt_price
        DivideByZero: If a bound sqrt price is zero
    """
    if lower_sqrt_price > upper_sqrt_price:
        raise MathError(
            f"Lower sqrt price {lower_sqrt_price} above upper {upper_sqrt_price}",
            MathErrorCode.INVALID_TWO_TICK_INDEX,
        )

    if current_sqrt_price < lower_sqrt_price:
        coin_a = check_div_round_up_if(
            (liquidity << 64) * (upper_sqrt_price - lower_sqrt_price),
            lower_sqrt_price * upper_sqrt_price,
            round_up,
        )
        coin_b = 0
    elif current_sqrt_price < upper_sqrt_price:
        coin_a = check_div_round_up_if(
            (liquidity << 64) * (upper_sqrt_price - current_sqrt_price),
            current_sqrt_price * upper_sqrt_price,
            round_up,
        )
        coin_b = check_div_round_up_if(
            liquidity * (current_sqrt_price - lower_sqrt_price), 1 << 64, round_up
        )
    else:
        coin_a = 0
        coin_b = check_div_round_up_if(
            liquidity * (upper_sqrt_price - lower_sqrt_price), 1 << 64, round_up
        )

    return CoinAmounts(coin_a=coin_a, coin_b=coin_b)


def estimate_liquidity_for_coin_a(sqrt_price_x: int, sqrt_price_y: int, coin_amount: int) -> int:
    """Liquidity that ``coin_amount`` of token A buys between two sqrt prices.

    The bounds may be given in either order.

    Raises:
        DivideByZero: If both sqrt prices are equal
    """
    lower = min(sqrt_price_x, sqrt_price_y)
    upper = max(sqrt_price_x, sqrt_price_y)
    num = (coin_amount * upper * lower) >> 64
    return check_div_round_up_if(num, upper - lower, False)


def estimate_liquidity_for_coin_b(sqrt_price_x: int, sqrt_price_y: int, coin_amount: int) -> int:
    """Liquidity that ``coin_amount`` of token B buys between two sqrt prices.

    Raises:
        DivideByZero: If both sqrt prices are equal
    """
    lower = min(sqrt_price_x, sqrt_price_y)
    upper = max(sqrt_price_x, sqrt_price_y)
    return check_div_round_up_if(coin_amount << 64, upper - lower, False)


def _apply_slippage(amount: int, slippage: Decimal, round_up: bool) -> int:
    if round_up:
        return int((Decimal(amount) * (1 + slippage)).to_integral_value(rounding=ROUND_CEILING))
    return int((Decimal(amount) * (1 - slippage)).to_integral_value(rounding=ROUND_FLOOR))


def est_liquidity_and_coin_amounts_from_one_amount(
    lower_tick: int,
    upper_tick: int,
    coin_amount: int,
    is_coin_a: bool,
    round_up: bool,
    slippage: Decimal | float | str,
    current_sqrt_price: int,
) -> LiquidityInput:
    """Size a two-sided deposit from an amount of one token.

    Estimates the liquidity the fixed token amount buys, derives the other
    token's amount from that liquidity, then widens (``round_up``) or
    narrows both amounts by ``slippage`` to produce the deposit bounds.

    Args:
        lower_tick: Position lower tick
        upper_tick: Position upper tick
        coin_amount: Amount of the fixed token, in base units
        is_coin_a: True if coin_amount is token A
        round_up: Round amounts up and add slippage (deposit) or down and
            subtract it (withdrawal)
        slippage: Fractional tolerance (0.01 = 1%)
        current_sqrt_price: Pool sqrt price (Q64.64)

    Raises:
        InvalidRangeForSingleSidedEstimate: If the pool price is below the
            range and token B is fixed, or above it and token A is fixed
        InvalidSqrtPrice: If current_sqrt_price is outside the supported range
    """
    current_tick = sqrt_price_x64_to_tick_index(current_sqrt_price)
    lower_sqrt_price = tick_index_to_sqrt_price_x64(lower_tick)
    upper_sqrt_price = tick_index_to_sqrt_price_x64(upper_tick)

    if current_tick < lower_tick:
        if not is_coin_a:
            raise InvalidRangeForSingleSidedEstimate(
                "lower tick cannot calculate liquidity by coinB"
            )
        liquidity = estimate_liquidity_for_coin_a(lower_sqrt_price, upper_sqrt_price, coin_amount)
    elif current_tick > upper_tick:
        if is_coin_a:
            raise InvalidRangeForSingleSidedEstimate(
                "upper tick cannot calculate liquidity by coinA"
            )
        liquidity = estimate_liquidity_for_coin_b(upper_sqrt_price, lower_sqrt_price, coin_amount)
    elif is_coin_a:
        liquidity = estimate_liquidity_for_coin_a(current_sqrt_price, upper_sqrt_price, coin_amount)
    else:
        liquidity = estimate_liquidity_for_coin_b(current_sqrt_price, lower_sqrt_price, coin_amount)

    amounts = get_coin_amounts_from_liquidity(
        liquidity, current_sqrt_price, lower_sqrt_price, upper_sqrt_price, round_up
    )
    slip = d(slippage)

    return LiquidityInput(
        coin_amount_a=amounts.coin_a,
        coin_amount_b=amounts.coin_b,
        token_max_a=_apply_slippage(amounts.coin_a, slip, round_up),
        token_max_b=_apply_slippage(amounts.coin_b, slip, round_up),
        liquidity_amount=liquidity,
        fix_amount_a=is_coin_a,
    )


def get_position_status(
    current_sqrt_price: int, lower_sqrt_price: int, upper_sqrt_price: int
) -> PositionStatus:
    """Classify the pool price against a position range (bounds inclusive)."""
    if current_sqrt_price < lower_sqrt_price:
        return PositionStatus.BELOW_RANGE
    if current_sqrt_price > upper_sqrt_price:
        return PositionStatus.ABOVE_RANGE
    return PositionStatus.IN_RANGE


def get_limit_sqrt_price_using_slippage(
    current_sqrt_price: int,
    decimals_x: int,
    decimals_y: int,
    slippage_percentage: Decimal | float | str,
    is_token_x: bool,
) -> int:
    """Sqrt price limit for a swap tolerating ``slippage_percentage`` percent.

    Selling token X pushes the price down, so the limit sits below the
    current price; selling token Y pushes it up.
    """
    current_price = sqrt_price_x64_to_price(current_sqrt_price, decimals_x, decimals_y)
    slip = d(slippage_percentage)
    rate = (100 - slip) / 100 if is_token_x else (100 + slip) / 100
    return price_to_sqrt_price_x64(current_price * rate, decimals_x, decimals_y)
