"""API endpoints for routing, tick math, liquidity and APR estimation."""

from collections.abc import AsyncIterator

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path

from clmm.api.schemas import (
    AprResponse,
    CoinAmountsRequest,
    CoinAmountsResponse,
    LiquidityEstimateRequest,
    LiquidityEstimateResponse,
    PositionAprRequest,
    RewarderAprResponse,
    RouteRequest,
    RouteResponse,
    SqrtPriceResponse,
    SqrtPriceToTickRequest,
    TickResponse,
)
from clmm.apr import RewardStream, est_position_apr_with_liquidity_hm
from clmm.config import ClientConfig
from clmm.constants import MAX_TICK_INDEX, MIN_TICK_INDEX
from clmm.math.liquidity import (
    est_liquidity_and_coin_amounts_from_one_amount,
    get_coin_amounts_from_liquidity,
)
from clmm.math.tick_math import (
    sqrt_price_x64_to_tick_index,
    sqrt_price_x64_to_tick_index_with_tick_spacing,
    tick_index_to_sqrt_price_x64,
)
from clmm.pools.client import PoolDataClient
from clmm.routing.router import RouteSelector
from clmm.routing.simulator import HttpSwapSimulator, SwapSimulator

logger = structlog.get_logger()

router = APIRouter()


def get_simulator() -> SwapSimulator:
    """Dependency provider for the dry-run simulator.

    Override this in tests to inject a mock simulator:
        app.dependency_overrides[get_simulator] = lambda: mock_simulator

    Raises:
        HTTPException: 503 if CLMM_SIMULATOR_URL is not configured
    """
    config = ClientConfig.from_env()
    if config.simulator_url is None:
        raise HTTPException(status_code=503, detail="No swap simulator configured")
    return HttpSwapSimulator(
        config.simulator_url,
        timeout_seconds=config.timeout_seconds,
        headers=config.headers,
    )


async def get_pool_client() -> AsyncIterator[PoolDataClient]:
    """Dependency provider for the pool data client, closed after the request."""
    client = PoolDataClient(ClientConfig.from_env())
    try:
        yield client
    finally:
        await client.aclose()


@router.post("/route")
async def route(
    request: RouteRequest,
    simulator: SwapSimulator = Depends(get_simulator),
    pool_client: PoolDataClient = Depends(get_pool_client),
) -> RouteResponse:
    """Find the best route for a swap.

    Error Handling:
        - No path, or every candidate simulated to zero: 404 (NoRouteFound handler)
        - Pool API failure while fetching pools: 502 (PoolDataError handler)
    """
    logger.info(
        "received_route_request",
        source_token=request.source_token,
        target_token=request.target_token,
        amount=request.amount,
        pool_count=len(request.pools) if request.pools is not None else None,
    )
    selector = RouteSelector(simulator, pool_client=pool_client)
    result = await selector.fetch_route(
        request.source_token,
        request.target_token,
        int(request.amount),
        pools=request.pools,
    )
    return RouteResponse(
        pool_path=result.pool_path,
        output_amount=str(result.output_amount),
        tokens=result.tokens,
    )


@router.get("/tick/{tick_index}/sqrt-price")
async def tick_to_sqrt_price(
    tick_index: int = Path(ge=MIN_TICK_INDEX, le=MAX_TICK_INDEX),
) -> SqrtPriceResponse:
    return SqrtPriceResponse(
        tick_index=tick_index,
        sqrt_price_x64=str(tick_index_to_sqrt_price_x64(tick_index)),
    )


@router.post("/sqrt-price/tick")
async def sqrt_price_to_tick(request: SqrtPriceToTickRequest) -> TickResponse:
    """Tick at or below a sqrt price, or the nearest aligned tick if tickSpacing is given."""
    sqrt_price = int(request.sqrt_price_x64)
    if request.tick_spacing is None:
        tick = sqrt_price_x64_to_tick_index(sqrt_price)
    else:
        tick = sqrt_price_x64_to_tick_index_with_tick_spacing(sqrt_price, request.tick_spacing)
    return TickResponse(tick_index=tick)


@router.post("/liquidity/amounts")
async def liquidity_amounts(request: CoinAmountsRequest) -> CoinAmountsResponse:
    amounts = get_coin_amounts_from_liquidity(
        int(request.liquidity),
        int(request.current_sqrt_price),
        tick_index_to_sqrt_price_x64(request.lower_tick_index),
        tick_index_to_sqrt_price_x64(request.upper_tick_index),
        request.round_up,
    )
    return CoinAmountsResponse(coin_a=str(amounts.coin_a), coin_b=str(amounts.coin_b))


@router.post("/liquidity/estimate")
async def liquidity_estimate(request: LiquidityEstimateRequest) -> LiquidityEstimateResponse:
    result = est_liquidity_and_coin_amounts_from_one_amount(
        request.lower_tick_index,
        request.upper_tick_index,
        int(request.coin_amount),
        request.is_coin_a,
        request.round_up,
        request.slippage,
        int(request.current_sqrt_price),
    )
    return LiquidityEstimateResponse(
        coin_amount_a=str(result.coin_amount_a),
        coin_amount_b=str(result.coin_amount_b),
        token_max_a=str(result.token_max_a),
        token_max_b=str(result.token_max_b),
        liquidity_amount=str(result.liquidity_amount),
        fix_amount_a=result.fix_amount_a,
    )


@router.post("/apr/position")
async def position_apr(request: PositionAprRequest) -> AprResponse:
    rewards = [
        RewardStream(
            coin_type=r.coin_type,
            flow_rate=r.flow_rate,
            decimals=r.decimals,
            price=r.price,
            has_ended=r.has_ended,
        )
        for r in request.rewards
    ]
    result = est_position_apr_with_liquidity_hm(
        request.current_tick_index,
        request.lower_tick_index,
        request.upper_tick_index,
        int(request.current_sqrt_price),
        int(request.pool_liquidity),
        int(request.pool_liquidity_hm),
        request.decimals_a,
        request.decimals_b,
        request.fee_rate,
        request.amount_a,
        request.amount_b,
        request.swap_volume,
        request.price_a,
        request.price_b,
        rewards,
    )
    return AprResponse(
        fee_apr=str(result.fee_apr),
        rewarder_apr=[
            RewarderAprResponse(
                coin_type=r.coin_type,
                apr=str(r.apr),
                amount_per_day=str(r.amount_per_day),
            )
            for r in result.rewarder_apr
        ],
        total_apr=str(result.total_apr),
    )
