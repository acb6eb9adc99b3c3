"""Async client for the pool data API.

Every endpoint wraps its payload as ``{"data": ...}``; the client unwraps
it and validates the result into pydantic models.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from clmm.config import ClientConfig
from clmm.errors import PoolDataError
from clmm.models import PoolInfo, RewardersApy, TickLiquidity, TokenInfo

logger = structlog.get_logger()

# Largest page the tick liquidity endpoint serves
TICK_LIQUIDITY_PAGE_SIZE = 1000


class PoolDataClient:
    """Fetches pools, tokens and tick liquidity from the pool data API.

    Usage:
        async with PoolDataClient(ClientConfig.from_env()) as client:
            pools = await client.get_all_pools()

    Args:
        config: Base URL, timeout and extra headers
        client: Pre-built AsyncClient (tests pass one with a MockTransport);
            when omitted, one is created from ``config`` on the first request
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config if config is not None else ClientConfig()
        self._owns_client = client is None
        self._client = client

    async def __aenter__(self) -> PoolDataClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout_seconds,
                headers={"Content-Type": "application/json", **self.config.headers},
            )
        return self._client

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._http().get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "pool_api_request_failed",
                path=path,
                status_code=e.response.status_code,
            )
            raise PoolDataError(f"Request failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("pool_api_request_failed", path=path, error=str(e))
            raise PoolDataError(f"Request to {path} failed: {e}") from e

        if not response.content:
            raise PoolDataError(f"Empty response from {path}")
        try:
            return response.json()
        except ValueError as e:
            raise PoolDataError(f"Malformed JSON from {path}") from e

    async def _get_data(self, path: str, params: dict[str, Any] | None = None) -> Any:
        body = await self._get(path, params)
        if not isinstance(body, dict) or "data" not in body:
            raise PoolDataError(f"Response from {path} has no data field")
        return body["data"]

    @staticmethod
    def _validate(model: Any, payload: Any, path: str) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise PoolDataError(f"Malformed payload from {path}: {e.error_count()} errors") from e

    async def get_all_pools(self) -> list[PoolInfo]:
        path = "/pools/v3"
        data = await self._get_data(path)
        pools = [self._validate(PoolInfo, item, path) for item in data or []]
        logger.debug("pools_fetched", pool_count=len(pools))
        return pools

    async def get_pool(self, pool_id: str) -> PoolInfo:
        path = f"/pools/v3/{pool_id}"
        return self._validate(PoolInfo, await self._get_data(path), path)

    async def get_all_tokens(self) -> list[TokenInfo]:
        path = "/tokens"
        data = await self._get_data(path)
        return [self._validate(TokenInfo, item, path) for item in data or []]

    async def get_token(self, coin_type: str) -> TokenInfo:
        path = f"/tokens/{coin_type}"
        return self._validate(TokenInfo, await self._get_data(path), path)

    async def fetch_tick_liquidity(
        self,
        pool_id: str,
        offset: int = 0,
        limit: int = TICK_LIQUIDITY_PAGE_SIZE,
        reverse: bool = False,
    ) -> tuple[list[TickLiquidity], bool]:
        """Fetch one page of tick liquidity.

        Args:
            pool_id: Pool object id
            offset: Index of the first tick row
            limit: Page size (at most TICK_LIQUIDITY_PAGE_SIZE)
            reverse: Negate tick indices, for viewing the pool from the Y side

        Returns:
            (ticks, has_next_page)
        """
        path = f"/tickLiquidity/{pool_id}"
        data = await self._get_data(path, params={"limit": limit, "offset": offset})
        if not isinstance(data, dict):
            raise PoolDataError(f"Response from {path} has no tick data")

        ticks = [self._validate(TickLiquidity, row, path) for row in data.get("tickData") or []]
        if reverse:
            ticks = [tick.model_copy(update={"tick_index": -tick.tick_index}) for tick in ticks]
        return ticks, bool(data.get("hasNextPage"))

    async def fetch_all_tick_liquidities(self, pool_id: str, reverse: bool = False) -> list[TickLiquidity]:
        """Fetch every tick liquidity page for a pool."""
        all_ticks: list[TickLiquidity] = []
        offset = 0
        has_next_page = True
        while has_next_page:
            ticks, has_next_page = await self.fetch_tick_liquidity(
                pool_id, offset=offset, limit=TICK_LIQUIDITY_PAGE_SIZE, reverse=reverse
            )
            if not ticks:
                break
            all_ticks.extend(ticks)
            offset += TICK_LIQUIDITY_PAGE_SIZE
        logger.debug("tick_liquidity_fetched", pool_id=pool_id, tick_count=len(all_ticks))
        return all_ticks

    async def get_rewarders_apy(self, pool_id: str) -> RewardersApy:
        """Rewarder APY summary; this endpoint is not wrapped in ``data``."""
        path = f"/pools/v3/rewarders-apy/{pool_id}"
        return self._validate(RewardersApy, await self._get(path), path)


__all__ = ["PoolDataClient", "TICK_LIQUIDITY_PAGE_SIZE"]
