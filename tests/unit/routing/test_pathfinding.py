"""Tests for pathfinding module."""

from amm_client.pools.registry import PoolSet
from amm_client.routing.pathfinding import PathFinder, TokenGraph
from tests.helpers import MINT_A, MINT_B, MINT_C, MINT_D, MINT_E, ONE, make_pool


def chain_pools() -> PoolSet:
    """A-B, B-C and C-D pools (C-D stored as D/C)."""
    return PoolSet(
        [
            make_pool(MINT_A, MINT_B, ONE, ONE),
            make_pool(MINT_B, MINT_C, ONE, ONE),
            make_pool(MINT_D, MINT_C, ONE, ONE),
        ]
    )


class TestTokenGraph:
    """Tests for TokenGraph class."""

    def test_empty_pool_set(self) -> None:
        graph = TokenGraph.from_pool_set(PoolSet())
        assert graph.token_count == 0
        assert not graph.has_token(MINT_A)

    def test_edges_are_bidirectional(self) -> None:
        graph = TokenGraph.from_pool_set(chain_pools())

        assert graph.token_count == 4
        assert graph.get_neighbors(MINT_B) == {MINT_A, MINT_C}
        assert graph.get_neighbors(MINT_C) == {MINT_B, MINT_D}
        assert graph.get_neighbors(MINT_E) == set()


class TestFindShortestPath:
    """Tests for PathFinder.find_shortest_path."""

    def test_direct(self) -> None:
        finder = PathFinder(chain_pools())
        assert finder.find_shortest_path(MINT_B, MINT_A) == [MINT_B, MINT_A]

    def test_three_hops(self) -> None:
        finder = PathFinder(chain_pools())
        assert finder.find_shortest_path(MINT_A, MINT_D) == [MINT_A, MINT_B, MINT_C, MINT_D]

    def test_max_hops_limits_search(self) -> None:
        finder = PathFinder(chain_pools())
        assert finder.find_shortest_path(MINT_A, MINT_D, max_hops=2) is None
        assert finder.find_shortest_path(MINT_A, MINT_C, max_hops=2) == [MINT_A, MINT_B, MINT_C]

    def test_same_token(self) -> None:
        finder = PathFinder(chain_pools())
        assert finder.find_shortest_path(MINT_A, MINT_A) == [MINT_A]

    def test_unknown_token(self) -> None:
        finder = PathFinder(chain_pools())
        assert finder.find_shortest_path(MINT_A, MINT_E) is None
        assert finder.find_shortest_path(MINT_E, MINT_A) is None

    def test_pool_set_change_invalidates_cache(self) -> None:
        """Adding a pool through the set refreshes its pathfinder."""
        pools = chain_pools()
        assert pools.pathfinder.find_shortest_path(MINT_A, MINT_D) == [
            MINT_A,
            MINT_B,
            MINT_C,
            MINT_D,
        ]

        pools.add_pool(make_pool(MINT_A, MINT_D, ONE, ONE))

        assert pools.pathfinder.find_shortest_path(MINT_A, MINT_D) == [MINT_A, MINT_D]


class TestFindAllPaths:
    """Tests for PathFinder.find_all_paths."""

    def test_all_paths_shortest_first(self) -> None:
        pools = chain_pools()
        pools.add_pool(make_pool(MINT_A, MINT_C, ONE, ONE))

        paths = PathFinder(pools).find_all_paths(MINT_A, MINT_C)

        assert paths[0] == [MINT_A, MINT_C]
        assert [MINT_A, MINT_B, MINT_C] in paths
        assert all(len(set(path)) == len(path) for path in paths)

    def test_max_paths(self) -> None:
        pools = chain_pools()
        pools.add_pool(make_pool(MINT_A, MINT_C, ONE, ONE))

        paths = PathFinder(pools).find_all_paths(MINT_A, MINT_C, max_paths=1)

        assert paths == [[MINT_A, MINT_C]]

    def test_no_paths(self) -> None:
        finder = PathFinder(chain_pools())
        assert finder.find_all_paths(MINT_A, MINT_A) == []
        assert finder.find_all_paths(MINT_E, MINT_A) == []
