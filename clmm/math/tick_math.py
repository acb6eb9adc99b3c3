"""Tick index <-> sqrt price conversions for concentrated-liquidity pools.

A tick index ``t`` represents the price ``1.0001^t``. Pools store the
square root of the price as a Q64.64 integer. The conversions here must
agree bit-for-bit with the on-chain implementation, so both directions use
integer arithmetic only:

- tick -> sqrt price multiplies together precomputed factors
  ``1.0001^(2^b / 2)`` for every set bit ``b`` of ``|tick|``. Positive ticks
  use a Q96 table and shift down to Q64 at the end; negative ticks use a Q64
  table of reciprocals directly.
- sqrt price -> tick computes an approximate base-1.0001 logarithm from the
  binary logarithm (14 squaring iterations), brackets the answer with two
  empirically tuned error margins and resolves the bracket by converting the
  upper candidate back to a sqrt price.

Price conversions account for token decimals:
``price = (sqrt_price / 2^64)^2 * 10^(decimals_a - decimals_b)``.
"""

from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Any

from clmm.constants import MAX_SQRT_PRICE, MIN_SQRT_PRICE, TICK_BOUND
from clmm.errors import InvalidSqrtPrice, MathErrorCode
from clmm.math.fixed_point import (
    DECIMAL_PRECISION,
    as_int_n,
    d,
    from_x64,
    mod,
    to_x64,
)

__all__ = [
    "BIT_PRECISION",
    "LOG_B_2_X32",
    "LOG_B_P_ERR_MARGIN_LOWER_X64",
    "LOG_B_P_ERR_MARGIN_UPPER_X64",
    "POSITIVE_TICK_RATIOS_X96",
    "NEGATIVE_TICK_RATIOS_X64",
    "tick_index_to_sqrt_price_x64",
    "sqrt_price_x64_to_tick_index",
    "sqrt_price_x64_to_tick_index_with_tick_spacing",
    "sqrt_price_x64_to_tick_index_with_tick_spacing_unsafe",
    "tick_index_to_sqrt_price_x64_with_tick_spacing",
    "price_to_sqrt_price_x64",
    "sqrt_price_x64_to_price",
    "tick_index_to_price",
    "price_to_tick_index",
    "price_to_tick_index_with_tick_spacing",
    "price_to_tick_index_with_tick_spacing_unsafe",
    "price_to_initializable_tick_index",
    "get_initializable_tick_index",
    "get_next_initializable_tick_index",
    "get_prev_initializable_tick_index",
    "round_tick_to_spacing",
    "tick_score",
    "parse_tick_data",
]

# =============================================================================
# Constants (must match the on-chain implementation exactly)
# =============================================================================

BIT_PRECISION = 14
LOG_B_2_X32 = 59543866431248
LOG_B_P_ERR_MARGIN_LOWER_X64 = 184467440737095516
LOG_B_P_ERR_MARGIN_UPPER_X64 = 15793534762490258745

# Q96 factors for positive ticks. Index 0 is sqrt(1.0001) (bit 0 set); the
# starting ratio for an even tick is 2^96. Index b >= 1 is the factor applied
# when bit b of the tick is set.
_POSITIVE_ONE_X96 = 79228162514264337593543950336
POSITIVE_TICK_RATIOS_X96 = (
    79232123823359799118286999567,
    79236085330515764027303304731,
    79244008939048815603706035061,
    79259858533276714757314932305,
    79291567232598584799939703904,
    79355022692464371645785046466,
    79482085999252804386437311141,
    79736823300114093921829183326,
    80248749790819932309965073892,
    81282483887344747381513967011,
    83390072131320151908154831281,
    87770609709833776024991924138,
    97234110755111693312479820773,
    119332217159966728226237229890,
    179736315981702064433883588727,
    407748233172238350107850275304,
    2098478828474011932436660412517,
    55581415166113811149459800483533,
    38992368544603139932233054999993551,
)

# Q64 reciprocal factors for negative ticks, indexed the same way.
_NEGATIVE_ONE_X64 = 18446744073709551616
NEGATIVE_TICK_RATIOS_X64 = (
    18445821805675392311,
    18444899583751176498,
    18443055278223354162,
    18439367220385604838,
    18431993317065449817,
    18417254355718160513,
    18387811781193591352,
    18329067761203520168,
    18212142134806087854,
    17980523815641551639,
    17526086738831147013,
    16651378430235024244,
    15030750278693429944,
    12247334978882834399,
    8131365268884726200,
    3584323654723342297,
    696457651847595233,
    26294789957452057,
    37481735321082,
)


# =============================================================================
# Tick -> sqrt price
# =============================================================================


def _tick_index_to_sqrt_price_positive(tick: int) -> int:
    ratio = POSITIVE_TICK_RATIOS_X96[0] if tick & 1 else _POSITIVE_ONE_X96
    for bit in range(1, len(POSITIVE_TICK_RATIOS_X96)):
        if tick & (1 << bit):
            ratio = (ratio * POSITIVE_TICK_RATIOS_X96[bit]) >> 96
    return ratio >> 32


def _tick_index_to_sqrt_price_negative(tick_index: int) -> int:
    tick = abs(tick_index)
    ratio = NEGATIVE_TICK_RATIOS_X64[0] if tick & 1 else _NEGATIVE_ONE_X64
    for bit in range(1, len(NEGATIVE_TICK_RATIOS_X64)):
        if tick & (1 << bit):
            ratio = (ratio * NEGATIVE_TICK_RATIOS_X64[bit]) >> 64
    return ratio


def tick_index_to_sqrt_price_x64(tick_index: int) -> int:
    """Convert a tick index to its Q64.64 sqrt price.

    The tick is trusted: callers keep it within [MIN_TICK_INDEX, MAX_TICK_INDEX].

    Args:
        tick_index: Signed tick index

    Returns:
        sqrt(1.0001^tick_index) * 2^64, as an int
    """
    if tick_index > 0:
        return _tick_index_to_sqrt_price_positive(tick_index)
    return _tick_index_to_sqrt_price_negative(tick_index)


# =============================================================================
# Sqrt price -> tick
# =============================================================================


def _validate_sqrt_price(sqrt_price_x64: int) -> None:
    if sqrt_price_x64 > MAX_SQRT_PRICE or sqrt_price_x64 < MIN_SQRT_PRICE:
        raise InvalidSqrtPrice(
            "Provided sqrtPrice is not within the supported sqrtPrice range: "
            f"{sqrt_price_x64} not in [{MIN_SQRT_PRICE}, {MAX_SQRT_PRICE}]",
            MathErrorCode.INVALID_SQRT_PRICE,
        )


def _tick_bracket(sqrt_price_x64: int) -> tuple[int, int]:
    """Approximate log base 1.0001 and return the (low, high) tick bracket."""
    msb = sqrt_price_x64.bit_length() - 1
    log2p_integer_x32 = (msb - 64) << 32

    bit = 0x8000000000000000
    precision = 0
    log2p_fraction_x64 = 0
    r = sqrt_price_x64 >> (msb - 63) if msb >= 64 else sqrt_price_x64 << (63 - msb)

    while bit > 0 and precision < BIT_PRECISION:
        r *= r
        r_more_than_two = r >> 127
        r >>= 63 + r_more_than_two
        log2p_fraction_x64 += bit * r_more_than_two
        bit >>= 1
        precision += 1

    log2p_fraction_x32 = log2p_fraction_x64 >> 32
    log2p_x32 = log2p_integer_x32 + log2p_fraction_x32
    logbp_x64 = log2p_x32 * LOG_B_2_X32

    # Arithmetic shifts: negative logs floor toward -inf
    tick_low = (logbp_x64 - LOG_B_P_ERR_MARGIN_LOWER_X64) >> 64
    tick_high = (logbp_x64 + LOG_B_P_ERR_MARGIN_UPPER_X64) >> 64
    return tick_low, tick_high


def _resolve_tick(sqrt_price_x64: int) -> int:
    tick_low, tick_high = _tick_bracket(sqrt_price_x64)
    if tick_low == tick_high:
        return tick_low
    if tick_index_to_sqrt_price_x64(tick_high) <= sqrt_price_x64:
        return tick_high
    return tick_low


def sqrt_price_x64_to_tick_index(sqrt_price_x64: int) -> int:
    """Convert a Q64.64 sqrt price to the greatest tick at or below it.

    Raises:
        InvalidSqrtPrice: If sqrt_price_x64 is outside [MIN_SQRT_PRICE, MAX_SQRT_PRICE]
    """
    _validate_sqrt_price(sqrt_price_x64)
    return _resolve_tick(sqrt_price_x64)


def round_tick_to_spacing(tick_index: int, tick_spacing: int) -> int:
    """Round a tick to the nearest multiple of tick_spacing (ties round up)."""
    lower = get_initializable_tick_index(tick_index, tick_spacing)
    if 2 * (tick_index - lower) >= tick_spacing:
        return lower + tick_spacing
    return lower


def sqrt_price_x64_to_tick_index_with_tick_spacing_unsafe(
    sqrt_price_x64: int, tick_spacing: int
) -> int:
    """Tick nearest to the sqrt price, aligned to tick_spacing.

    Skips the sqrt price range check; callers on hot paths validate once
    up front.
    """
    return round_tick_to_spacing(_resolve_tick(sqrt_price_x64), tick_spacing)


def sqrt_price_x64_to_tick_index_with_tick_spacing(sqrt_price_x64: int, tick_spacing: int) -> int:
    """Tick nearest to the sqrt price, aligned to tick_spacing.

    Raises:
        InvalidSqrtPrice: If sqrt_price_x64 is outside the supported range
    """
    _validate_sqrt_price(sqrt_price_x64)
    return sqrt_price_x64_to_tick_index_with_tick_spacing_unsafe(sqrt_price_x64, tick_spacing)


def tick_index_to_sqrt_price_x64_with_tick_spacing(
    tick_index: int, tick_spacing: int = 1, scale_up: bool = False
) -> int:
    """Sqrt price of the tick aligned to tick_spacing.

    Args:
        tick_index: Signed tick index
        tick_spacing: Pool tick spacing
        scale_up: Align to the next multiple at or above the tick instead of
            the one at or below it
    """
    aligned = get_initializable_tick_index(tick_index, tick_spacing)
    if scale_up and aligned != tick_index:
        aligned += tick_spacing
    return tick_index_to_sqrt_price_x64(aligned)


# =============================================================================
# Prices
# =============================================================================


def price_to_sqrt_price_x64(price: Decimal | int | float | str, decimals_a: int, decimals_b: int) -> int:
    """Convert a human price of token A in token B to a Q64.64 sqrt price."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        raw = d(price) * Decimal(10) ** (decimals_b - decimals_a)
        return to_x64(raw.sqrt())


def sqrt_price_x64_to_price(sqrt_price_x64: int, decimals_a: int, decimals_b: int) -> Decimal:
    """Convert a Q64.64 sqrt price to a human price of token A in token B."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return from_x64(sqrt_price_x64) ** 2 * Decimal(10) ** (decimals_a - decimals_b)


def tick_index_to_price(tick_index: int, decimals_a: int, decimals_b: int) -> Decimal:
    return sqrt_price_x64_to_price(tick_index_to_sqrt_price_x64(tick_index), decimals_a, decimals_b)


def price_to_tick_index(price: Decimal | int | float | str, decimals_a: int, decimals_b: int) -> int:
    return sqrt_price_x64_to_tick_index(price_to_sqrt_price_x64(price, decimals_a, decimals_b))


def price_to_tick_index_with_tick_spacing(
    price: Decimal | int | float | str, decimals_a: int, decimals_b: int, tick_spacing: int
) -> int:
    return sqrt_price_x64_to_tick_index_with_tick_spacing(
        price_to_sqrt_price_x64(price, decimals_a, decimals_b), tick_spacing
    )


def price_to_tick_index_with_tick_spacing_unsafe(
    price: Decimal | int | float | str, decimals_a: int, decimals_b: int, tick_spacing: int
) -> int:
    return sqrt_price_x64_to_tick_index_with_tick_spacing_unsafe(
        price_to_sqrt_price_x64(price, decimals_a, decimals_b), tick_spacing
    )


def price_to_initializable_tick_index(
    price: Decimal | int | float | str, decimals_a: int, decimals_b: int, tick_spacing: int
) -> int:
    return get_initializable_tick_index(
        price_to_tick_index(price, decimals_a, decimals_b), tick_spacing
    )


# =============================================================================
# Tick spacing alignment
# =============================================================================


def get_initializable_tick_index(tick_index: int, tick_spacing: int) -> int:
    """Greatest multiple of tick_spacing at or below tick_index (floored modulo)."""
    return tick_index - mod(tick_index, tick_spacing)


def get_next_initializable_tick_index(tick_index: int, tick_spacing: int) -> int:
    return get_initializable_tick_index(tick_index, tick_spacing) + tick_spacing


def get_prev_initializable_tick_index(tick_index: int, tick_spacing: int) -> int:
    return get_initializable_tick_index(tick_index, tick_spacing) - tick_spacing


def tick_score(tick_index: int) -> Decimal:
    """Shift a tick into the non-negative range for ordering."""
    return Decimal(tick_index + TICK_BOUND)


def parse_tick_data(ticks: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Decode tick rows from the pool API.

    ``index`` arrives as an unsigned 32-bit word and ``liquidityNet`` as an
    unsigned 128-bit word; both are converted to signed ints.
    """
    parsed = []
    for tick in ticks:
        parsed.append(
            {
                "object_id": tick.get("objectId"),
                "index": as_int_n(int(tick["index"]), 32),
                "sqrt_price": int(tick["sqrtPrice"]),
                "liquidity_net": as_int_n(int(tick["liquidityNet"]), 128),
                "liquidity_gross": int(tick["liquidityGross"]),
                "fee_growth_outside_a": int(tick["feeGrowthOutsideA"]),
                "fee_growth_outside_b": int(tick["feeGrowthOutsideB"]),
                "rewarders_growth_outside": [int(v) for v in tick.get("rewardersGrowthOutside", [])],
            }
        )
    return parsed
