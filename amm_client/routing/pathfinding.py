"""Token graph and pathfinding for multi-hop routing.

This module discovers token paths through available pools. It separates the
graph structure and search from pool storage; the route builder then turns a
path into hops and accounts.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

if TYPE_CHECKING:
    from amm_client.pools.registry import PoolSet


class TokenGraph:
    """Graph of tokens connected by pools.

    Edges are undirected: every constant product pool trades both ways.
    """

    def __init__(self) -> None:
        self._adjacency: dict[Pubkey, set[Pubkey]] = {}

    @classmethod
    def from_pool_set(cls, pool_set: PoolSet) -> TokenGraph:
        graph = cls()
        for token_a, token_b in pool_set.pairs():
            graph.add_edge(token_a, token_b)
        return graph

    def add_edge(self, token_a: Pubkey, token_b: Pubkey) -> None:
        """Add a bidirectional edge between two tokens."""
        self._adjacency.setdefault(token_a, set()).add(token_b)
        self._adjacency.setdefault(token_b, set()).add(token_a)

    def get_neighbors(self, token: Pubkey) -> set[Pubkey]:
        return self._adjacency.get(token, set())

    def has_token(self, token: Pubkey) -> bool:
        return token in self._adjacency

    @property
    def token_count(self) -> int:
        """Number of unique tokens in the graph."""
        return len(self._adjacency)


class PathFinder:
    """Cached pathfinding over a PoolSet.

    The graph is rebuilt lazily after the pool set changes.

    Usage:
        finder = PathFinder(pool_set)
        path = finder.find_shortest_path(token_in, token_out, max_hops=3)
    """

    def __init__(self, pool_set: PoolSet) -> None:
        self._pool_set = pool_set
        self._graph: TokenGraph | None = None
        # (token_in, token_out, max_hops) -> path or None
        self._shortest_path_cache: dict[tuple[Pubkey, Pubkey, int], list[Pubkey] | None] = {}

    def invalidate(self) -> None:
        """Drop the cached graph and paths."""
        self._graph = None
        self._shortest_path_cache.clear()

    @property
    def graph(self) -> TokenGraph:
        if self._graph is None:
            self._graph = TokenGraph.from_pool_set(self._pool_set)
        return self._graph

    def find_shortest_path(
        self,
        token_in: Pubkey,
        token_out: Pubkey,
        max_hops: int = 3,
    ) -> list[Pubkey] | None:
        """Find the path with the fewest hops from token_in to token_out.

        Args:
            token_in: Starting mint
            token_out: Target mint
            max_hops: Maximum number of swaps allowed (default 3)

        Returns:
            Token path including both endpoints, or None if no path exists
            within max_hops.
        """
        if token_in == token_out:
            return [token_in]

        cache_key = (token_in, token_out, max_hops)
        if cache_key in self._shortest_path_cache:
            return self._shortest_path_cache[cache_key]

        graph = self.graph
        result: list[Pubkey] | None = None
        if graph.has_token(token_in) and graph.has_token(token_out):
            queue: deque[list[Pubkey]] = deque([[token_in]])
            visited = {token_in}
            while queue and result is None:
                path = queue.popleft()
                # A path of n tokens has n - 1 hops; extending it adds one
                if len(path) > max_hops:
                    continue
                for neighbor in graph.get_neighbors(path[-1]):
                    if neighbor == token_out:
                        result = path + [neighbor]
                        break
                    if neighbor not in visited:
                        visited.add(neighbor)
                        queue.append(path + [neighbor])

        self._shortest_path_cache[cache_key] = result
        return result

    def find_all_paths(
        self,
        token_in: Pubkey,
        token_out: Pubkey,
        max_hops: int = 3,
        max_paths: int = 20,
    ) -> list[list[Pubkey]]:
        """Enumerate simple paths up to max_hops, shortest first.

        Args:
            token_in: Starting mint
            token_out: Target mint
            max_hops: Maximum number of swaps allowed (default 3)
            max_paths: Maximum number of paths to return (default 20)

        Returns:
            List of token paths; empty if none exist
        """
        graph = self.graph
        if token_in == token_out or not graph.has_token(token_in):
            return []

        paths: list[list[Pubkey]] = []
        queue: deque[list[Pubkey]] = deque([[token_in]])
        while queue and len(paths) < max_paths:
            path = queue.popleft()
            if len(path) > max_hops:
                continue
            for neighbor in graph.get_neighbors(path[-1]):
                if neighbor == token_out:
                    paths.append(path + [neighbor])
                    if len(paths) >= max_paths:
                        break
                elif neighbor not in path:
                    queue.append(path + [neighbor])
        return paths


__all__ = ["TokenGraph", "PathFinder"]
