"""Request and response models for the HTTP API."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from clmm.constants import MAX_TICK_INDEX, MIN_TICK_INDEX
from clmm.models import PoolInfo, Uint64, Uint128


class RouteRequest(BaseModel):
    """Swap to route. Pools are fetched from the pool API when omitted."""

    source_token: str = Field(alias="sourceToken")
    target_token: str = Field(alias="targetToken")
    amount: Uint64
    pools: list[PoolInfo] | None = None

    model_config = {"populate_by_name": True}


class RouteResponse(BaseModel):
    pool_path: list[str] = Field(alias="poolPath")
    output_amount: str = Field(alias="outputAmount")
    tokens: list[str] | None = None

    model_config = {"populate_by_name": True}


class SqrtPriceResponse(BaseModel):
    tick_index: int = Field(alias="tickIndex")
    sqrt_price_x64: str = Field(alias="sqrtPriceX64")

    model_config = {"populate_by_name": True}


class SqrtPriceToTickRequest(BaseModel):
    sqrt_price_x64: Uint128 = Field(alias="sqrtPriceX64")
    tick_spacing: int | None = Field(default=None, gt=0, alias="tickSpacing")

    model_config = {"populate_by_name": True}


class TickResponse(BaseModel):
    tick_index: int = Field(alias="tickIndex")

    model_config = {"populate_by_name": True}


class CoinAmountsRequest(BaseModel):
    """Liquidity to convert, with the range given by its tick bounds."""

    liquidity: Uint128
    current_sqrt_price: Uint128 = Field(alias="currentSqrtPrice")
    lower_tick_index: int = Field(alias="lowerTickIndex", ge=MIN_TICK_INDEX, le=MAX_TICK_INDEX)
    upper_tick_index: int = Field(alias="upperTickIndex", ge=MIN_TICK_INDEX, le=MAX_TICK_INDEX)
    round_up: bool = Field(default=False, alias="roundUp")

    model_config = {"populate_by_name": True}


class CoinAmountsResponse(BaseModel):
    coin_a: str = Field(alias="coinA")
    coin_b: str = Field(alias="coinB")

    model_config = {"populate_by_name": True}


class LiquidityEstimateRequest(BaseModel):
    lower_tick_index: int = Field(alias="lowerTickIndex", ge=MIN_TICK_INDEX, le=MAX_TICK_INDEX)
    upper_tick_index: int = Field(alias="upperTickIndex", ge=MIN_TICK_INDEX, le=MAX_TICK_INDEX)
    coin_amount: Uint64 = Field(alias="coinAmount")
    is_coin_a: bool = Field(alias="isCoinA")
    round_up: bool = Field(default=True, alias="roundUp")
    slippage: Decimal = Field(default=Decimal("0.01"), ge=0, le=1)
    current_sqrt_price: Uint128 = Field(alias="currentSqrtPrice")

    model_config = {"populate_by_name": True}


class LiquidityEstimateResponse(BaseModel):
    coin_amount_a: str = Field(alias="coinAmountA")
    coin_amount_b: str = Field(alias="coinAmountB")
    token_max_a: str = Field(alias="tokenMaxA")
    token_max_b: str = Field(alias="tokenMaxB")
    liquidity_amount: str = Field(alias="liquidityAmount")
    fix_amount_a: bool = Field(alias="fixAmountA")

    model_config = {"populate_by_name": True}


class RewardStreamInput(BaseModel):
    coin_type: str = Field(alias="coinType")
    flow_rate: Decimal = Field(alias="flowRate")
    decimals: int = Field(ge=0, le=38)
    price: Decimal
    has_ended: bool = Field(default=False, alias="hasEnded")

    model_config = {"populate_by_name": True}


class PositionAprRequest(BaseModel):
    """Inputs for the harmonic-mean APR estimate of one position.

    ``poolLiquidityHM`` of 0 selects the delta method.
    """

    current_tick_index: int = Field(alias="currentTickIndex")
    lower_tick_index: int = Field(alias="lowerTickIndex", ge=MIN_TICK_INDEX, le=MAX_TICK_INDEX)
    upper_tick_index: int = Field(alias="upperTickIndex", ge=MIN_TICK_INDEX, le=MAX_TICK_INDEX)
    current_sqrt_price: Uint128 = Field(alias="currentSqrtPrice")
    pool_liquidity: Uint128 = Field(alias="poolLiquidity")
    pool_liquidity_hm: Uint128 = Field(default="0", alias="poolLiquidityHM")
    decimals_a: int = Field(alias="decimalsA", ge=0, le=38)
    decimals_b: int = Field(alias="decimalsB", ge=0, le=38)
    fee_rate: Decimal = Field(alias="feeRate")
    amount_a: Decimal = Field(alias="amountA")
    amount_b: Decimal = Field(alias="amountB")
    swap_volume: Decimal = Field(alias="swapVolume")
    price_a: Decimal = Field(alias="priceA")
    price_b: Decimal = Field(alias="priceB")
    rewards: list[RewardStreamInput] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class RewarderAprResponse(BaseModel):
    coin_type: str = Field(alias="coinType")
    apr: str
    amount_per_day: str = Field(alias="amountPerDay")

    model_config = {"populate_by_name": True}


class AprResponse(BaseModel):
    fee_apr: str = Field(alias="feeApr")
    rewarder_apr: list[RewarderAprResponse] = Field(alias="rewarderApr")
    total_apr: str = Field(alias="totalApr")

    model_config = {"populate_by_name": True}
