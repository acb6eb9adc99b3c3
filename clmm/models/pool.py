"""Pydantic models for the pool data API payloads."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from clmm.models.types import CoinType, TickIndex, Uint128


class Rewarder(BaseModel):
    """A reward emission stream attached to a pool.

    ``flow_rate`` is the emission per second in Q64.64 base units of the
    reward token. The API sends these fields in snake_case except
    ``hasEnded``.
    """

    coin_type: CoinType
    flow_rate: Decimal = Decimal(0)
    reward_amount: Decimal = Decimal(0)
    rewards_allocated: Decimal = Decimal(0)
    has_ended: bool = Field(default=False, alias="hasEnded")

    model_config = {"populate_by_name": True}


class TokenInfo(BaseModel):
    """Token metadata and USD price as served by the pool API."""

    coin_type: CoinType = Field(alias="coinType")
    decimals: int = Field(ge=0, le=38)
    name: str | None = None
    ticker: str | None = None
    price: Decimal | None = None
    is_verified: bool = Field(default=False, alias="isVerified")

    model_config = {"populate_by_name": True}


class PoolInfo(BaseModel):
    """Snapshot of a concentrated-liquidity pool."""

    pool_id: str = Field(alias="poolId")
    token_x_type: CoinType = Field(alias="tokenXType")
    token_y_type: CoinType = Field(alias="tokenYType")
    tvl: Decimal = Decimal(0)
    current_sqrt_price: Uint128 = Field(alias="currentSqrtPrice")
    current_tick_index: TickIndex = Field(alias="currentTickIndex")
    liquidity: Uint128 = "0"
    liquidity_hm: Uint128 = Field(default="0", alias="liquidityHM")
    tick_spacing: int = Field(default=1, gt=0, alias="tickSpacing")
    lp_fees_percent: Decimal = Field(
        default=Decimal(0),
        alias="lpFeesPercent",
        description="LP fee rate as a percentage of swap volume.",
    )
    volume_24h: Decimal = Field(default=Decimal(0), alias="volume24h")
    fees_24h: Decimal = Field(default=Decimal(0), alias="fees24h")
    is_stable: bool = Field(default=False, alias="isStable")
    rewarders: list[Rewarder] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @property
    def sqrt_price_x64(self) -> int:
        return int(self.current_sqrt_price)

    @property
    def liquidity_int(self) -> int:
        return int(self.liquidity)

    @property
    def liquidity_hm_int(self) -> int:
        return int(self.liquidity_hm)


class RewardersApy(BaseModel):
    """Rewarder APY summary for a single pool."""

    pool_id: str
    rewarders: list[Rewarder] = Field(default_factory=list)
    apy: Decimal = Decimal(0)


class TickLiquidity(BaseModel):
    """Active liquidity at one initialized tick."""

    pool_id: str = Field(alias="poolId")
    tick_index: int = Field(alias="tickIndex")
    liquidity: Decimal

    model_config = {"populate_by_name": True}
