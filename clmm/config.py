"""Configuration for routing and the HTTP collaborators."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from clmm.constants import DRY_RUN_PATH_LEN, U64_MAX

DEFAULT_API_BASE_URL = "https://api.mmt.finance"


@dataclass(frozen=True)
class RouterConfig:
    """Route selection parameters.

    Attributes:
        dry_run_path_len: Number of ranked candidate paths to simulate (default: 5)
        max_swap_amount: Input amount cap passed to the simulator (default: u64 max)
        max_hops: Longest path to enumerate, or None for no limit
        simulation_timeout_seconds: Per-candidate simulation timeout; a candidate
            that times out scores zero like any other failed simulation
    """

    dry_run_path_len: int = DRY_RUN_PATH_LEN
    max_swap_amount: int = U64_MAX
    max_hops: int | None = None
    simulation_timeout_seconds: float | None = 10.0


DEFAULT_ROUTER_CONFIG = RouterConfig()


@dataclass(frozen=True)
class ClientConfig:
    """Endpoints and transport settings for the pool API and the simulator.

    Attributes:
        base_url: Pool data API root (pools, tokens, tick liquidity)
        simulator_url: Dry-run endpoint, or None when no remote simulator is used
        timeout_seconds: HTTP timeout for every request
        headers: Extra headers sent with every request
    """

    base_url: str = DEFAULT_API_BASE_URL
    simulator_url: str | None = None
    timeout_seconds: float = 10.0
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build from CLMM_API_BASE_URL, CLMM_SIMULATOR_URL and CLMM_HTTP_TIMEOUT."""
        return cls(
            base_url=os.environ.get("CLMM_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            simulator_url=os.environ.get("CLMM_SIMULATOR_URL") or None,
            timeout_seconds=float(os.environ.get("CLMM_HTTP_TIMEOUT", "10.0")),
        )
