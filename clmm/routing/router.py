"""Multi-hop route selection by dry-run simulation.

Candidates are ranked structurally by the pathfinder (hop count, then
summed edge weight, highest first), and only the top ``dry_run_path_len``
are simulated. The simulations run concurrently; a candidate whose
simulation raises or times out scores zero instead of aborting the batch.
The highest simulated output wins, with ties going to the better-ranked
candidate.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import structlog

from clmm.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from clmm.errors import NoRouteFound
from clmm.models import PoolInfo
from clmm.pools.coins import format_coin_type, normalize_struct_tag
from clmm.routing.pathfinding import PathFinder, TokenGraph
from clmm.routing.simulator import SwapSimulator
from clmm.routing.types import PathCandidate, PoolEdge, RouteResult

if TYPE_CHECKING:
    from clmm.pools.client import PoolDataClient

logger = structlog.get_logger()


def pool_edges(pools: Iterable[PoolInfo]) -> list[PoolEdge]:
    """Graph edges for the pools that hold any value (tvl > 0)."""
    return [
        PoolEdge(
            pool_id=pool.pool_id,
            token_x=pool.token_x_type,
            token_y=pool.token_y_type,
            tvl=pool.tvl,
        )
        for pool in pools
        if pool.tvl > 0
    ]


class RouteSelector:
    """Chooses the best multi-hop route between two tokens.

    Args:
        simulator: Dry-run simulator used to score candidates
        config: Routing parameters. Defaults to DEFAULT_ROUTER_CONFIG.
        pool_client: Pool data provider, used by fetch_route when no pool
            list is supplied
    """

    def __init__(
        self,
        simulator: SwapSimulator,
        config: RouterConfig | None = None,
        pool_client: PoolDataClient | None = None,
    ) -> None:
        self.simulator = simulator
        self.config = config if config is not None else DEFAULT_ROUTER_CONFIG
        self.pool_client = pool_client

    def get_routes(
        self, source_token: str, target_token: str, pools: Iterable[PoolEdge]
    ) -> list[PathCandidate]:
        """Top-ranked candidate paths, at most ``dry_run_path_len`` of them.

        Returns an empty list when either token is missing from the graph or
        no path connects them.
        """
        finder = PathFinder(TokenGraph.from_pools(pools))
        candidates = finder.find_all_paths(source_token, target_token, self.config.max_hops)
        return candidates[: self.config.dry_run_path_len]

    async def _simulate_candidate(self, candidate: PathCandidate, amount_in: int) -> int:
        try:
            if self.config.simulation_timeout_seconds is None:
                return await self.simulator.simulate(candidate.steps, amount_in)
            return await asyncio.wait_for(
                self.simulator.simulate(candidate.steps, amount_in),
                timeout=self.config.simulation_timeout_seconds,
            )
        except Exception as e:
            logger.warning(
                "dry_run_failed",
                pool_path=candidate.pool_ids,
                amount_in=amount_in,
                error=str(e) or type(e).__name__,
            )
            return 0

    async def choose_best_route(self, candidates: Sequence[PathCandidate], amount: int) -> RouteResult:
        """Simulate every candidate concurrently and keep the largest output.

        Args:
            candidates: Ranked candidates (typically from get_routes)
            amount: Input amount; capped at ``max_swap_amount``

        Raises:
            NoRouteFound: If there are no candidates or every one scored zero
        """
        if not candidates:
            raise NoRouteFound("No candidate paths to simulate")

        amount_in = min(amount, self.config.max_swap_amount)
        outputs = await asyncio.gather(
            *(self._simulate_candidate(candidate, amount_in) for candidate in candidates)
        )

        best: PathCandidate | None = None
        best_output = 0
        for candidate, output in zip(candidates, outputs):
            if output > best_output:
                best, best_output = candidate, output

        if best is None:
            raise NoRouteFound(
                f"All {len(candidates)} candidate paths simulated to zero output"
            )

        logger.info(
            "route_selected",
            pool_path=best.pool_ids,
            tokens=list(best.tokens),
            output_amount=best_output,
            candidates_simulated=len(candidates),
        )
        return RouteResult(pool_path=best.pool_ids, output_amount=best_output, tokens=list(best.tokens))

    async def find_best_route(
        self,
        source_token: str,
        target_token: str,
        amount: int,
        pools: Iterable[PoolEdge],
    ) -> RouteResult:
        """Route ``amount`` of source_token to target_token over ``pools``.

        When the tokens are the same the input amount is returned unchanged
        with an empty pool path and nothing is simulated.

        Raises:
            NoRouteFound: If no path exists or every candidate scored zero
        """
        if normalize_struct_tag(source_token) == normalize_struct_tag(target_token):
            return RouteResult(pool_path=[], output_amount=amount)

        candidates = self.get_routes(source_token, target_token, pools)
        if not candidates:
            logger.info("no_route_candidates", source_token=source_token, target_token=target_token)
            raise NoRouteFound(f"No path from {source_token} to {target_token}")

        logger.debug(
            "route_candidates_found",
            source_token=source_token,
            target_token=target_token,
            candidate_count=len(candidates),
        )
        return await self.choose_best_route(candidates, amount)

    async def fetch_route(
        self,
        source_token: str,
        target_token: str,
        amount: int,
        pools: Sequence[PoolInfo] | None = None,
    ) -> RouteResult:
        """Route a swap, fetching the pool list when none (or an empty list) is given.

        Pools with no TVL are skipped. The native SUI coin type may be given
        in its short form.

        Raises:
            ValueError: If amount is not positive, or no pools are given and
                there is no pool client to fetch them
            NoRouteFound: If the source token is in no pool, no path exists,
                or every candidate scored zero
        """
        if amount <= 0:
            raise ValueError(f"Swap amount must be positive, got {amount}")

        source_token = format_coin_type(source_token)
        target_token = format_coin_type(target_token)
        if normalize_struct_tag(source_token) == normalize_struct_tag(target_token):
            return RouteResult(pool_path=[], output_amount=amount)

        if not pools:
            if self.pool_client is None:
                raise ValueError("No pools given and no pool client configured")
            pools = await self.pool_client.get_all_pools()

        edges = pool_edges(pools)
        known_tokens = set()
        for edge in edges:
            known_tokens.add(normalize_struct_tag(edge.token_x))
            known_tokens.add(normalize_struct_tag(edge.token_y))
        if normalize_struct_tag(source_token) not in known_tokens:
            raise NoRouteFound(f"Source token {source_token} is not in any pool")

        return await self.find_best_route(source_token, target_token, amount, edges)


__all__ = ["RouteSelector", "pool_edges"]
