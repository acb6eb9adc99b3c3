"""Fee and reward APR estimation for concentrated-liquidity positions.

Two position-level estimators share the same shape:

    fee_apr    = fee_rate * volume_24h * share / position_tvl * 365
    reward_apr = reward_per_day * reward_price * share / position_tvl * 36500

They differ only in the liquidity ``share`` the position is credited with:

- delta method: ``delta_liquidity / (pool_liquidity + delta_liquidity)``
- harmonic-mean method: ``delta_liquidity / liquidity_hm``, falling back to
  the delta method when ``liquidity_hm`` is exactly zero

``fee_rate`` is the pool's LP fee in percent, so both results are percent.
Reward streams marked as ended are skipped. A zero position TVL or a zero
delta liquidity yields an APR of 0 rather than an error.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from clmm.constants import DAYS_PER_YEAR, Q_64, SECONDS_PER_DAY
from clmm.errors import TokenNotFound
from clmm.math.fixed_point import d, decimals_multiplier
from clmm.math.liquidity import est_liquidity_and_coin_amounts_from_one_amount
from clmm.math.tick_math import (
    price_to_tick_index_with_tick_spacing_unsafe,
    sqrt_price_x64_to_price,
    tick_index_to_sqrt_price_x64,
)
from clmm.models import PoolInfo, TokenInfo

__all__ = [
    "RewardStream",
    "RewarderApr",
    "AprResult",
    "reward_amount_per_day",
    "calc_liquidity_amounts",
    "get_pos_valid_tvl",
    "est_position_apr_with_delta_method",
    "est_position_apr_with_liquidity_hm",
    "calculate_pool_apr",
    "estimate_pool_apr",
    "reward_streams_for_pool",
]

_Q64 = Decimal(Q_64)

# Width of the reference position sized by estimate_pool_apr
REFERENCE_RANGE_LOWER = Decimal("0.95")
REFERENCE_RANGE_UPPER = Decimal("1.05")
REFERENCE_SLIPPAGE = Decimal("0.01")


@dataclass(frozen=True)
class RewardStream:
    """A reward emission joined with the reward token's metadata."""

    coin_type: str
    flow_rate: Decimal
    decimals: int
    price: Decimal
    has_ended: bool = False


@dataclass(frozen=True)
class RewarderApr:
    coin_type: str
    apr: Decimal
    amount_per_day: Decimal


@dataclass(frozen=True)
class AprResult:
    """Fee APR plus one entry per active reward stream, all in percent."""

    fee_apr: Decimal
    rewarder_apr: list[RewarderApr] = field(default_factory=list)

    @property
    def total_apr(self) -> Decimal:
        return self.fee_apr + sum((r.apr for r in self.rewarder_apr), Decimal(0))


ZERO_APR = AprResult(fee_apr=Decimal(0))


def reward_amount_per_day(flow_rate: Decimal | int | str, decimals: int) -> Decimal:
    """Daily emission in whole tokens from a Q64.64 per-second flow rate."""
    return d(flow_rate) / _Q64 * SECONDS_PER_DAY / decimals_multiplier(decimals)


def _clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(value, high))


def calc_liquidity_amounts(
    amount_a: Decimal,
    amount_b: Decimal,
    decimals_a: int,
    decimals_b: int,
    current_sqrt_price: Decimal,
    lower_sqrt_price: Decimal,
    upper_sqrt_price: Decimal,
) -> tuple[Decimal, Decimal]:
    """Liquidity that each token amount alone would support in the range.

    Amounts are in whole tokens, sqrt prices are raw Q64.64 values. The
    current price is clamped into the range; a side whose interval is empty
    supports zero liquidity.
    """
    current = _clamp(current_sqrt_price, lower_sqrt_price, upper_sqrt_price)

    liquidity_a = Decimal(0)
    if upper_sqrt_price > current:
        liquidity_a = (
            amount_a
            * decimals_multiplier(decimals_a)
            * (upper_sqrt_price * current)
            / _Q64
            / (upper_sqrt_price - current)
        ).to_integral_value(rounding=ROUND_HALF_UP)

    liquidity_b = Decimal(0)
    if current > lower_sqrt_price:
        liquidity_b = (
            amount_b * decimals_multiplier(decimals_b) * _Q64 / (current - lower_sqrt_price)
        ).to_integral_value(rounding=ROUND_HALF_UP)

    return liquidity_a, liquidity_b


def get_pos_valid_tvl(
    delta_liquidity: Decimal,
    current_sqrt_price: Decimal,
    lower_sqrt_price: Decimal,
    upper_sqrt_price: Decimal,
    decimals_a: int,
    decimals_b: int,
    price_a: Decimal,
    price_b: Decimal,
) -> Decimal:
    """USD value of the tokens backing ``delta_liquidity`` in the range."""
    current = _clamp(current_sqrt_price, lower_sqrt_price, upper_sqrt_price)
    delta_y = delta_liquidity * (current - lower_sqrt_price) / _Q64
    delta_x = delta_liquidity * (upper_sqrt_price - current) / (current * upper_sqrt_price) * _Q64
    return (
        delta_x / decimals_multiplier(decimals_a) * price_a
        + delta_y / decimals_multiplier(decimals_b) * price_b
    )


def _delta_liquidity(
    current_tick_index: int,
    lower_tick_index: int,
    upper_tick_index: int,
    liquidity_a: Decimal,
    liquidity_b: Decimal,
) -> Decimal:
    if current_tick_index < lower_tick_index:
        return liquidity_a
    if current_tick_index > upper_tick_index:
        return liquidity_b
    return min(liquidity_a, liquidity_b)


def _est_position_apr(
    current_tick_index: int,
    lower_tick_index: int,
    upper_tick_index: int,
    current_sqrt_price_x64: int,
    share_denominator: Decimal | None,
    pool_liquidity: int,
    decimals_a: int,
    decimals_b: int,
    fee_rate: Decimal | float | str,
    amount_a: Decimal | float | str,
    amount_b: Decimal | float | str,
    swap_volume: Decimal | float | str,
    price_a: Decimal | float | str,
    price_b: Decimal | float | str,
    rewards: Iterable[RewardStream],
) -> AprResult:
    lower_sqrt_price = Decimal(tick_index_to_sqrt_price_x64(lower_tick_index))
    upper_sqrt_price = Decimal(tick_index_to_sqrt_price_x64(upper_tick_index))
    current_sqrt_price = Decimal(current_sqrt_price_x64)

    liquidity_a, liquidity_b = calc_liquidity_amounts(
        d(amount_a),
        d(amount_b),
        decimals_a,
        decimals_b,
        current_sqrt_price,
        lower_sqrt_price,
        upper_sqrt_price,
    )
    delta_liquidity = _delta_liquidity(
        current_tick_index, lower_tick_index, upper_tick_index, liquidity_a, liquidity_b
    )
    pos_tvl = get_pos_valid_tvl(
        delta_liquidity,
        current_sqrt_price,
        lower_sqrt_price,
        upper_sqrt_price,
        decimals_a,
        decimals_b,
        d(price_a),
        d(price_b),
    )

    if share_denominator is None:
        share_denominator = Decimal(pool_liquidity) + delta_liquidity

    if delta_liquidity == 0 or pos_tvl == 0 or share_denominator == 0:
        share = Decimal(0)
    else:
        share = delta_liquidity / share_denominator

    fee_apr = Decimal(0)
    if share:
        fee_apr = d(fee_rate) * d(swap_volume) * share / pos_tvl * DAYS_PER_YEAR

    rewarder_apr = []
    for reward in rewards:
        if reward.has_ended:
            continue
        per_day = reward_amount_per_day(reward.flow_rate, reward.decimals)
        apr = Decimal(0)
        if share:
            apr = per_day * reward.price * share / pos_tvl * 36500
        rewarder_apr.append(
            RewarderApr(coin_type=reward.coin_type, apr=apr, amount_per_day=per_day)
        )

    return AprResult(fee_apr=fee_apr, rewarder_apr=rewarder_apr)


def est_position_apr_with_delta_method(
    current_tick_index: int,
    lower_tick_index: int,
    upper_tick_index: int,
    current_sqrt_price_x64: int,
    pool_liquidity: int,
    decimals_a: int,
    decimals_b: int,
    fee_rate: Decimal | float | str,
    amount_a: Decimal | float | str,
    amount_b: Decimal | float | str,
    swap_volume: Decimal | float | str,
    price_a: Decimal | float | str,
    price_b: Decimal | float | str,
    rewards: Iterable[RewardStream] = (),
) -> AprResult:
    """Estimate a position's APR crediting it ``delta / (pool + delta)``.

    Args:
        current_tick_index: Pool tick
        lower_tick_index: Position lower tick
        upper_tick_index: Position upper tick
        current_sqrt_price_x64: Pool sqrt price (Q64.64)
        pool_liquidity: Pool active liquidity
        decimals_a: Token A decimals
        decimals_b: Token B decimals
        fee_rate: LP fee in percent of volume
        amount_a: Position token A amount (whole tokens)
        amount_b: Position token B amount (whole tokens)
        swap_volume: 24h swap volume in USD
        price_a: Token A USD price
        price_b: Token B USD price
        rewards: Reward streams of the pool

    Returns:
        AprResult in percent
    """
    return _est_position_apr(
        current_tick_index,
        lower_tick_index,
        upper_tick_index,
        current_sqrt_price_x64,
        None,
        pool_liquidity,
        decimals_a,
        decimals_b,
        fee_rate,
        amount_a,
        amount_b,
        swap_volume,
        price_a,
        price_b,
        rewards,
    )


def est_position_apr_with_liquidity_hm(
    current_tick_index: int,
    lower_tick_index: int,
    upper_tick_index: int,
    current_sqrt_price_x64: int,
    pool_liquidity: int,
    pool_liquidity_hm: int,
    decimals_a: int,
    decimals_b: int,
    fee_rate: Decimal | float | str,
    amount_a: Decimal | float | str,
    amount_b: Decimal | float | str,
    swap_volume: Decimal | float | str,
    price_a: Decimal | float | str,
    price_b: Decimal | float | str,
    rewards: Iterable[RewardStream] = (),
) -> AprResult:
    """Estimate a position's APR crediting it ``delta / liquidity_hm``.

    Uses the delta method when ``pool_liquidity_hm`` is exactly zero. Other
    arguments are as for est_position_apr_with_delta_method.
    """
    share_denominator = Decimal(pool_liquidity_hm) if pool_liquidity_hm != 0 else None
    return _est_position_apr(
        current_tick_index,
        lower_tick_index,
        upper_tick_index,
        current_sqrt_price_x64,
        share_denominator,
        pool_liquidity,
        decimals_a,
        decimals_b,
        fee_rate,
        amount_a,
        amount_b,
        swap_volume,
        price_a,
        price_b,
        rewards,
    )


def calculate_pool_apr(pool: PoolInfo, rewards: Iterable[RewardStream] = ()) -> AprResult:
    """Pool-wide APR from 24h fees and reward emissions over pool TVL."""
    tvl = pool.tvl
    fee_apr = Decimal(0) if tvl == 0 else pool.fees_24h * DAYS_PER_YEAR / tvl * 100

    rewarder_apr = []
    for reward in rewards:
        if reward.has_ended:
            continue
        per_day = reward_amount_per_day(reward.flow_rate, reward.decimals)
        usd_per_day = per_day * reward.price
        apr = Decimal(0) if tvl == 0 else usd_per_day * DAYS_PER_YEAR / tvl * 100
        rewarder_apr.append(
            RewarderApr(coin_type=reward.coin_type, apr=apr, amount_per_day=per_day)
        )

    return AprResult(fee_apr=fee_apr, rewarder_apr=rewarder_apr)


def _find_token(tokens: Sequence[TokenInfo], coin_type: str) -> TokenInfo | None:
    for token in tokens:
        if token.coin_type == coin_type:
            return token
    return None


def reward_streams_for_pool(pool: PoolInfo, tokens: Sequence[TokenInfo]) -> list[RewardStream]:
    """Join a pool's rewarders with reward token metadata.

    Raises:
        TokenNotFound: If a reward token is missing from ``tokens``
    """
    streams = []
    for rewarder in pool.rewarders:
        token = _find_token(tokens, rewarder.coin_type)
        if token is None:
            raise TokenNotFound(f"Reward token not found: {rewarder.coin_type}")
        streams.append(
            RewardStream(
                coin_type=rewarder.coin_type,
                flow_rate=rewarder.flow_rate,
                decimals=token.decimals,
                price=token.price or Decimal(0),
                has_ended=rewarder.has_ended,
            )
        )
    return streams


def estimate_pool_apr(pool: PoolInfo, tokens: Sequence[TokenInfo]) -> AprResult:
    """Estimate the APR a new position in ``pool`` would earn.

    Stable pools use the pool-wide figure. Otherwise a reference position is
    sized from one whole unit of token A over a range of +/-5% around the
    current price, and its APR is estimated with the harmonic-mean method.

    Raises:
        TokenNotFound: If pool or reward token metadata is missing
    """
    if pool.liquidity_int == 0:
        return ZERO_APR

    token_a = _find_token(tokens, pool.token_x_type)
    token_b = _find_token(tokens, pool.token_y_type)
    if token_a is None or token_b is None:
        raise TokenNotFound(f"Token not found for pool {pool.pool_id}")

    rewards = reward_streams_for_pool(pool, tokens)
    if pool.is_stable:
        return calculate_pool_apr(pool, rewards)

    price = sqrt_price_x64_to_price(pool.sqrt_price_x64, token_a.decimals, token_b.decimals)
    lower_tick = price_to_tick_index_with_tick_spacing_unsafe(
        price * REFERENCE_RANGE_LOWER, token_a.decimals, token_b.decimals, pool.tick_spacing
    )
    upper_tick = price_to_tick_index_with_tick_spacing_unsafe(
        price * REFERENCE_RANGE_UPPER, token_a.decimals, token_b.decimals, pool.tick_spacing
    )
    deposit = est_liquidity_and_coin_amounts_from_one_amount(
        lower_tick,
        upper_tick,
        10**token_a.decimals,
        True,
        True,
        REFERENCE_SLIPPAGE,
        pool.sqrt_price_x64,
    )

    return est_position_apr_with_liquidity_hm(
        pool.current_tick_index,
        lower_tick,
        upper_tick,
        pool.sqrt_price_x64,
        pool.liquidity_int,
        pool.liquidity_hm_int,
        token_a.decimals,
        token_b.decimals,
        pool.lp_fees_percent,
        Decimal(deposit.coin_amount_a) / decimals_multiplier(token_a.decimals),
        Decimal(deposit.coin_amount_b) / decimals_multiplier(token_b.decimals),
        pool.volume_24h,
        token_a.price or Decimal(0),
        token_b.price or Decimal(0),
        rewards,
    )
