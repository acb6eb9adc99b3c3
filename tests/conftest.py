"""Pytest configuration and fixtures."""

from collections.abc import Callable

import httpx
import pytest

from clmm.routing.simulator import MockSwapSimulator
from clmm.routing.types import PoolEdge
from tests.helpers import TOKEN_A, TOKEN_B, TOKEN_C, make_edge

# =============================================================================
# Pool fixtures
# =============================================================================


@pytest.fixture
def triangle_pools() -> list[PoolEdge]:
    """A-B and B-C with deep liquidity, plus a shallow direct A-C pool."""
    return [
        make_edge("pool-ab", TOKEN_A, TOKEN_B, tvl=1000),
        make_edge("pool-bc", TOKEN_B, TOKEN_C, tvl=1000),
        make_edge("pool-ac", TOKEN_A, TOKEN_C, tvl=1),
    ]


@pytest.fixture
def parallel_pools() -> list[PoolEdge]:
    """Two fee tiers for the same A-B pair."""
    return [
        make_edge("pool-ab-low-fee", TOKEN_A, TOKEN_B, tvl=5000),
        make_edge("pool-ab-high-fee", TOKEN_B, TOKEN_A, tvl=200),
    ]


# =============================================================================
# Mock collaborators
# =============================================================================


@pytest.fixture
def mock_simulator() -> MockSwapSimulator:
    """Simulator returning the input unchanged at every hop."""
    return MockSwapSimulator(default_rate=(1, 1))


def json_transport(routes: dict[str, object], status_code: int = 200) -> httpx.MockTransport:
    """MockTransport serving fixed JSON bodies keyed by request path.

    Unknown paths answer 404. Every request is appended to ``transport.requests``.
    """
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path not in routes:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(status_code, json=routes[request.url.path])

    transport = httpx.MockTransport(handler)
    transport.requests = requests  # type: ignore[attr-defined]
    return transport


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    return json_transport
