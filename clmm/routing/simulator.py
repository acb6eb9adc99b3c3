"""Dry-run swap simulators used to score candidate routes."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

import httpx
import structlog

from clmm.constants import HIGH_LIMIT_SQRT_PRICE, LOW_LIMIT_SQRT_PRICE
from clmm.errors import SimulationFailed
from clmm.routing.types import SwapStep

logger = structlog.get_logger()


class SwapSimulator(Protocol):
    """Protocol for dry-run simulation of a multi-hop swap.

    This allows swapping between a remote simulator and a mock for testing.
    """

    async def simulate(self, steps: Sequence[SwapStep], amount_in: int) -> int:
        """Simulate swapping ``amount_in`` through ``steps`` in order.

        Each hop's output is the next hop's input.

        Args:
            steps: Hops of the route
            amount_in: Input amount of the first hop's input token

        Returns:
            Output amount of the last hop

        Raises:
            Exception: Any failure; the router scores the candidate as zero
        """
        ...


def sqrt_price_limit(step: SwapStep) -> int:
    """Price limit that never binds before the input is exhausted."""
    return LOW_LIMIT_SQRT_PRICE if step.is_x_to_y else HIGH_LIMIT_SQRT_PRICE


SimulationOutcome = int | Exception


class MockSwapSimulator:
    """Mock simulator for testing without a ledger.

    Configure outputs per pool path, and track calls for assertions.
    """

    def __init__(
        self,
        outputs: dict[tuple[str, ...], SimulationOutcome] | None = None,
        default_rate: tuple[int, int] | None = None,
        handler: Callable[[Sequence[SwapStep], int], int] | None = None,
    ):
        """Initialize mock simulator.

        Args:
            outputs: Mapping of pool id tuple -> output amount, or an exception
                to raise for that path
            default_rate: If set, (numerator, denominator) ratio applied per hop
                for any unconfigured path
            handler: If set, called for unconfigured paths instead of default_rate
        """
        self.outputs = outputs or {}
        self.default_rate = default_rate
        self.handler = handler
        self.calls: list[tuple[tuple[str, ...], int]] = []  # (pool ids, amount_in)

    async def simulate(self, steps: Sequence[SwapStep], amount_in: int) -> int:
        pool_ids = tuple(step.pool_id for step in steps)
        self.calls.append((pool_ids, amount_in))

        if pool_ids in self.outputs:
            outcome = self.outputs[pool_ids]
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        if self.handler is not None:
            return self.handler(steps, amount_in)

        if self.default_rate is not None:
            num, denom = self.default_rate
            amount = amount_in
            for _ in steps:
                amount = amount * num // denom
            return amount

        raise SimulationFailed(f"No simulated output configured for {list(pool_ids)}")

    @property
    def simulated_paths(self) -> list[tuple[str, ...]]:
        return [pool_ids for pool_ids, _ in self.calls]


class HttpSwapSimulator:
    """Simulator that posts the route to a remote dry-run endpoint.

    The endpoint receives the hops (pool, token types, direction and price
    limit) plus the input amount, and answers with ``amountOut``.
    """

    def __init__(
        self,
        url: str,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
        headers: dict[str, str] | None = None,
    ):
        """Initialize the simulator.

        Args:
            url: Dry-run endpoint URL
            client: Shared AsyncClient; a short-lived one is created per call
                when omitted
            timeout_seconds: Request timeout for created clients
            headers: Extra headers sent with every request
        """
        self.url = url
        self._client = client
        self.timeout_seconds = timeout_seconds
        self.headers = headers or {}

    @staticmethod
    def build_payload(steps: Sequence[SwapStep], amount_in: int) -> dict[str, object]:
        return {
            "amountIn": str(amount_in),
            "steps": [
                {
                    "poolId": step.pool_id,
                    "tokenXType": step.token_x,
                    "tokenYType": step.token_y,
                    "isXtoY": step.is_x_to_y,
                    "sqrtPriceLimit": str(sqrt_price_limit(step)),
                }
                for step in steps
            ],
        }

    async def simulate(self, steps: Sequence[SwapStep], amount_in: int) -> int:
        payload = self.build_payload(steps, amount_in)
        if self._client is not None:
            response = await self._client.post(self.url, json=payload, headers=self.headers)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(self.url, json=payload, headers=self.headers)

        if response.status_code != 200:
            raise SimulationFailed(f"Simulation request failed with status {response.status_code}")

        data = response.json()
        if data.get("error") or data.get("status", "success") != "success":
            raise SimulationFailed(f"Dry run failed: {data.get('error') or 'Unknown failure'}")

        amount_out = data.get("amountOut")
        if amount_out is None:
            logger.info("dry_run_missing_output", pool_ids=[s.pool_id for s in steps])
            return 0
        return int(amount_out)


__all__ = [
    "SwapSimulator",
    "MockSwapSimulator",
    "HttpSwapSimulator",
    "sqrt_price_limit",
]
