"""Tests for the token multigraph and path enumeration."""

import math
from decimal import Decimal

from clmm.routing.pathfinding import PathFinder, TokenGraph, sort_paths
from clmm.routing.types import PathCandidate
from tests.helpers import SUI, TOKEN_A, TOKEN_B, TOKEN_C, TOKEN_D, USDC, make_edge


def finder_for(*edges) -> PathFinder:
    return PathFinder(TokenGraph.from_pools(edges))


class TestTokenGraph:
    """Tests for TokenGraph construction."""

    def test_empty(self) -> None:
        graph = TokenGraph.from_pools([])
        assert graph.token_count == 0
        assert graph.pool_count == 0

    def test_single_pool_is_undirected(self) -> None:
        graph = TokenGraph.from_pools([make_edge("p1", TOKEN_A, TOKEN_B)])

        assert graph.token_count == 2
        assert graph.get_neighbors(TOKEN_A) == {TOKEN_B}
        assert graph.get_neighbors(TOKEN_B) == {TOKEN_A}

    def test_parallel_pools_kept(self, parallel_pools) -> None:
        graph = TokenGraph.from_pools(parallel_pools)

        assert graph.token_count == 2
        assert graph.pool_count == 2
        assert [p.pool_id for p in graph.pools_between(TOKEN_A, TOKEN_B)] == [
            "pool-ab-low-fee",
            "pool-ab-high-fee",
        ]
        assert [p.pool_id for p in graph.pools_between(TOKEN_B, TOKEN_A)] == [
            "pool-ab-low-fee",
            "pool-ab-high-fee",
        ]

    def test_self_pair_ignored(self) -> None:
        graph = TokenGraph.from_pools([make_edge("p1", TOKEN_A, TOKEN_A)])
        assert graph.token_count == 0

    def test_short_address_normalized(self) -> None:
        graph = TokenGraph.from_pools([make_edge("p1", "0x2::sui::SUI", USDC)])

        assert graph.has_token(SUI)
        assert graph.has_token("0x2::sui::SUI")
        pool = graph.pools_between(SUI, USDC)[0]
        assert pool.token_x == SUI

    def test_unknown_token(self) -> None:
        graph = TokenGraph.from_pools([make_edge("p1", TOKEN_A, TOKEN_B)])
        assert not graph.has_token(TOKEN_C)
        assert graph.get_neighbors(TOKEN_C) == set()
        assert graph.pools_between(TOKEN_A, TOKEN_C) == []


class TestFindAllPaths:
    """Tests for PathFinder.find_all_paths."""

    def test_direct_path_ranked_before_two_hop(self, triangle_pools) -> None:
        paths = finder_for(*triangle_pools).find_all_paths(TOKEN_A, TOKEN_C)

        assert [p.pool_ids for p in paths] == [["pool-ac"], ["pool-ab", "pool-bc"]]
        assert paths[1].tokens == (TOKEN_A, TOKEN_B, TOKEN_C)
        assert [p.hops for p in paths] == [1, 2]

    def test_max_hops(self, triangle_pools) -> None:
        paths = finder_for(*triangle_pools).find_all_paths(TOKEN_A, TOKEN_C, max_hops=1)
        assert [p.pool_ids for p in paths] == [["pool-ac"]]

    def test_parallel_pools_ranked_by_weight_descending(self, parallel_pools) -> None:
        paths = finder_for(*parallel_pools).find_all_paths(TOKEN_A, TOKEN_B)

        assert [p.pool_ids for p in paths] == [["pool-ab-high-fee"], ["pool-ab-low-fee"]]
        assert paths[0].weight > paths[1].weight

    def test_swap_direction_follows_pool_orientation(self, parallel_pools) -> None:
        paths = finder_for(*parallel_pools).find_all_paths(TOKEN_A, TOKEN_B)
        steps = {p.steps[0].pool_id: p.steps[0] for p in paths}

        assert steps["pool-ab-low-fee"].is_x_to_y is True
        # Stored as B/A, so A -> B swaps y for x
        assert steps["pool-ab-high-fee"].is_x_to_y is False
        assert all(s.token_in == TOKEN_A and s.token_out == TOKEN_B for s in steps.values())

    def test_parallel_pools_expand_per_hop(self) -> None:
        finder = finder_for(
            make_edge("ab-1", TOKEN_A, TOKEN_B, tvl=100),
            make_edge("ab-2", TOKEN_A, TOKEN_B, tvl=10),
            make_edge("bc-1", TOKEN_B, TOKEN_C, tvl=100),
            make_edge("bc-2", TOKEN_C, TOKEN_B, tvl=10),
        )

        paths = finder.find_all_paths(TOKEN_A, TOKEN_C)

        assert len(paths) == 4
        assert paths[0].pool_ids == ["ab-2", "bc-2"]
        assert paths[-1].pool_ids == ["ab-1", "bc-1"]

    def test_cycles_do_not_revisit_tokens(self) -> None:
        finder = finder_for(
            make_edge("ab", TOKEN_A, TOKEN_B),
            make_edge("bc", TOKEN_B, TOKEN_C),
            make_edge("ca", TOKEN_C, TOKEN_A),
            make_edge("cd", TOKEN_C, TOKEN_D),
        )

        paths = finder.find_all_paths(TOKEN_A, TOKEN_D)

        assert [p.pool_ids for p in paths] == [["ca", "cd"], ["ab", "bc", "cd"]]
        for path in paths:
            assert len(set(path.tokens)) == len(path.tokens)

    def test_same_token_has_no_paths(self, triangle_pools) -> None:
        assert finder_for(*triangle_pools).find_all_paths(TOKEN_A, TOKEN_A) == []

    def test_unknown_token_has_no_paths(self, triangle_pools) -> None:
        finder = finder_for(*triangle_pools)
        assert finder.find_all_paths(TOKEN_A, TOKEN_D) == []
        assert finder.find_all_paths(TOKEN_D, TOKEN_A) == []

    def test_disconnected_tokens(self) -> None:
        finder = finder_for(make_edge("ab", TOKEN_A, TOKEN_B), make_edge("cd", TOKEN_C, TOKEN_D))
        assert finder.find_all_paths(TOKEN_A, TOKEN_D) == []

    def test_short_sui_address_resolves(self) -> None:
        finder = finder_for(make_edge("p1", SUI, USDC))
        paths = finder.find_all_paths("0x2::sui::SUI", USDC)
        assert [p.pool_ids for p in paths] == [["p1"]]

    def test_results_cached_but_not_shared(self, triangle_pools) -> None:
        finder = finder_for(*triangle_pools)
        first = finder.find_all_paths(TOKEN_A, TOKEN_C)
        first.clear()

        assert len(finder.find_all_paths(TOKEN_A, TOKEN_C)) == 2


class TestRanking:
    """Tests for edge weights and sort_paths."""

    def test_weight_decreases_with_tvl(self) -> None:
        assert make_edge("p", tvl=10_000).weight < make_edge("p", tvl=10).weight

    def test_empty_pool_weight_is_infinite(self) -> None:
        assert make_edge("p", tvl=0).weight == math.inf

    def test_dust_pool_weight_is_finite(self) -> None:
        # float(1e-17) + 1 rounds to exactly 1.0
        dust = make_edge("p", tvl=Decimal("1e-17")).weight

        assert math.isfinite(dust)
        assert dust > make_edge("p", tvl=1).weight

    def test_hops_before_weight(self) -> None:
        one_hop_heavy = PathCandidate(tokens=(TOKEN_A, TOKEN_B), steps=(object(),), weight=5.0)
        two_hop_light = PathCandidate(
            tokens=(TOKEN_A, TOKEN_C, TOKEN_B), steps=(object(), object()), weight=0.1
        )

        assert sort_paths([two_hop_light, one_hop_heavy]) == [one_hop_heavy, two_hop_light]

    def test_same_hops_higher_weight_first(self) -> None:
        light = PathCandidate(tokens=(TOKEN_A, TOKEN_B), steps=(object(),), weight=0.1)
        heavy = PathCandidate(tokens=(TOKEN_A, TOKEN_B), steps=(object(),), weight=5.0)

        assert sort_paths([light, heavy]) == [heavy, light]

    def test_ties_keep_order(self) -> None:
        first = PathCandidate(tokens=(TOKEN_A, TOKEN_B), steps=(object(),), weight=1.0)
        second = PathCandidate(tokens=(TOKEN_A, TOKEN_B), steps=(object(),), weight=1.0)

        ranked = sort_paths([first, second])

        assert ranked[0] is first
        assert ranked[1] is second
