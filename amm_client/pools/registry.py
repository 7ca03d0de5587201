"""Pool set for managing decoded pools by token pair.

Pathfinding operations are delegated to PathFinder
(amm_client.routing.pathfinding) which builds a token graph from this set.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

import structlog
from solders.pubkey import Pubkey

from amm_client.models.pool import PoolRecord

logger = structlog.get_logger()

if TYPE_CHECKING:
    from amm_client.routing.pathfinding import PathFinder


class PoolSet:
    """Decoded pools indexed by unordered token pair.

    One pool is kept per pair; adding a second pool for the same pair
    replaces the first. This matches the program, which derives a single
    pool account per ordered mint pair, and keeps routing unambiguous.
    """

    def __init__(self, pools: Iterable[PoolRecord] | None = None) -> None:
        self._pools: dict[frozenset[Pubkey], PoolRecord] = {}
        # Secondary index: mint -> pools that trade it
        self._by_token: dict[Pubkey, dict[frozenset[Pubkey], PoolRecord]] = {}
        self._pathfinder: PathFinder | None = None

        if pools:
            for pool in pools:
                self.add_pool(pool)

    @property
    def pathfinder(self) -> PathFinder:
        """Get the PathFinder for this set (lazy initialization)."""
        if self._pathfinder is None:
            from amm_client.routing.pathfinding import PathFinder

            self._pathfinder = PathFinder(self)
        return self._pathfinder

    def add_pool(self, pool: PoolRecord) -> None:
        """Add a pool, replacing any existing pool for the same pair."""
        pair_key = frozenset([pool.token_a, pool.token_b])
        if pair_key in self._pools:
            logger.debug(
                "pool_replaced",
                pool=str(pool.address) if pool.address else None,
                token_a=str(pool.token_a),
                token_b=str(pool.token_b),
            )
        self._pools[pair_key] = pool
        for token in pair_key:
            self._by_token.setdefault(token, {})[pair_key] = pool
        if self._pathfinder is not None:
            self._pathfinder.invalidate()

    def get_pool(self, token_a: Pubkey, token_b: Pubkey) -> PoolRecord | None:
        """Get the pool for a token pair (order independent)."""
        return self._pools.get(frozenset([token_a, token_b]))

    def pools_with_token(self, token: Pubkey) -> list[PoolRecord]:
        """All pools that trade token, on either side."""
        return list(self._by_token.get(token, {}).values())

    def pairs(self) -> list[tuple[Pubkey, Pubkey]]:
        return [(pool.token_a, pool.token_b) for pool in self._pools.values()]

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    def __len__(self) -> int:
        return len(self._pools)

    def __iter__(self) -> Iterator[PoolRecord]:
        return iter(self._pools.values())


__all__ = ["PoolSet"]
