"""Token graph and pathfinding for multi-hop routing.

The graph is a multigraph: every pool is its own edge, and several pools
may connect the same token pair (different fee tiers, say). Adjacency is
keyed by token, then by neighbouring token, and holds the list of pools
between the two, so parallel pools are never collapsed.

Paths are simple in tokens (no token visited twice). A token path through
``n`` hops expands into one candidate per combination of parallel pools.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from clmm.pools.coins import normalize_struct_tag
from clmm.routing.types import PathCandidate, PoolEdge, SwapStep


class TokenGraph:
    """Multigraph of tokens connected by pools."""

    def __init__(self) -> None:
        self._adjacency: dict[str, dict[str, list[PoolEdge]]] = {}

    @classmethod
    def from_pools(cls, pools: Iterable[PoolEdge]) -> TokenGraph:
        """Build a TokenGraph with one edge per pool.

        Token types are normalized so short and long address forms meet at
        the same vertex. Pools joining a token to itself are ignored.
        """
        graph = cls()
        for pool in pools:
            graph.add_pool(pool)
        return graph

    def add_pool(self, pool: PoolEdge) -> None:
        token_x = normalize_struct_tag(pool.token_x)
        token_y = normalize_struct_tag(pool.token_y)
        if token_x == token_y:
            return
        if token_x != pool.token_x or token_y != pool.token_y:
            pool = PoolEdge(pool_id=pool.pool_id, token_x=token_x, token_y=token_y, tvl=pool.tvl)
        self._adjacency.setdefault(token_x, {}).setdefault(token_y, []).append(pool)
        self._adjacency.setdefault(token_y, {}).setdefault(token_x, []).append(pool)

    def get_neighbors(self, token: str) -> set[str]:
        """Tokens directly tradeable with ``token``."""
        return set(self._adjacency.get(normalize_struct_tag(token), {}))

    def pools_between(self, token_a: str, token_b: str) -> list[PoolEdge]:
        """All pools joining two tokens, in insertion order."""
        neighbors = self._adjacency.get(normalize_struct_tag(token_a), {})
        return list(neighbors.get(normalize_struct_tag(token_b), []))

    def has_token(self, token: str) -> bool:
        return normalize_struct_tag(token) in self._adjacency

    @property
    def token_count(self) -> int:
        return len(self._adjacency)

    @property
    def pool_count(self) -> int:
        pool_ids = set()
        for neighbors in self._adjacency.values():
            for pools in neighbors.values():
                pool_ids.update(pool.pool_id for pool in pools)
        return len(pool_ids)


def _path_weight(steps: Iterable[SwapStep], weights: dict[str, float]) -> float:
    return sum(weights[step.pool_id] for step in steps)


def sort_paths(paths: Iterable[PathCandidate]) -> list[PathCandidate]:
    """Rank candidates: fewer hops first, then higher summed weight.

    The sort is stable, so candidates that tie keep their enumeration order.
    """
    return sorted(paths, key=lambda p: (p.hops, -p.weight))


class PathFinder:
    """Enumerates candidate paths over a TokenGraph.

    Usage:
        finder = PathFinder(TokenGraph.from_pools(edges))
        candidates = finder.find_all_paths(token_in, token_out)
    """

    def __init__(self, graph: TokenGraph) -> None:
        self._graph = graph
        # (token_in, token_out, max_hops) -> ranked candidates
        self._path_cache: dict[tuple[str, str, int | None], list[PathCandidate]] = {}

    @property
    def graph(self) -> TokenGraph:
        return self._graph

    def find_all_paths(
        self,
        token_in: str,
        token_out: str,
        max_hops: int | None = None,
    ) -> list[PathCandidate]:
        """Find every simple path from token_in to token_out, ranked.

        Args:
            token_in: Source token type
            token_out: Target token type
            max_hops: Longest path to consider, or None for no limit

        Returns:
            Candidates sorted by sort_paths. Empty when either token is not
            in the graph, when no path exists, or when the tokens are equal.
        """
        source = normalize_struct_tag(token_in)
        target = normalize_struct_tag(token_out)
        cache_key = (source, target, max_hops)
        if cache_key in self._path_cache:
            return list(self._path_cache[cache_key])

        if source == target or not self._graph.has_token(source) or not self._graph.has_token(target):
            self._path_cache[cache_key] = []
            return []

        candidates = []
        for tokens in self._token_paths(source, target, max_hops):
            candidates.extend(self._expand(tokens))

        ranked = sort_paths(candidates)
        self._path_cache[cache_key] = ranked
        return list(ranked)

    def _token_paths(
        self, source: str, target: str, max_hops: int | None
    ) -> Iterator[tuple[str, ...]]:
        """Depth-first enumeration of simple token paths."""
        path = [source]
        visited = {source}

        def walk(token: str) -> Iterator[tuple[str, ...]]:
            if max_hops is not None and len(path) - 1 >= max_hops:
                return
            for neighbor in sorted(self._graph.get_neighbors(token)):
                if neighbor in visited:
                    continue
                if neighbor == target:
                    yield (*path, neighbor)
                    continue
                path.append(neighbor)
                visited.add(neighbor)
                yield from walk(neighbor)
                path.pop()
                visited.discard(neighbor)

        yield from walk(source)

    def _expand(self, tokens: tuple[str, ...]) -> list[PathCandidate]:
        """One candidate per combination of parallel pools along a token path."""
        partial: list[tuple[SwapStep, ...]] = [()]
        weights: dict[str, float] = {}

        for token_from, token_to in zip(tokens, tokens[1:]):
            hop_steps = []
            for pool in self._graph.pools_between(token_from, token_to):
                weights[pool.pool_id] = pool.weight
                hop_steps.append(
                    SwapStep(
                        pool_id=pool.pool_id,
                        token_x=pool.token_x,
                        token_y=pool.token_y,
                        is_x_to_y=pool.token_x == token_from,
                    )
                )
            partial = [steps + (step,) for steps in partial for step in hop_steps]

        return [
            PathCandidate(tokens=tokens, steps=steps, weight=_path_weight(steps, weights))
            for steps in partial
        ]


__all__ = ["TokenGraph", "PathFinder", "sort_paths"]
