"""Pool registry: the single owner of pool records and provider positions.

Pools are keyed by canonical PairKey, so (A, B) and (B, A) resolve to the
same record. Each pair also gets its own lock; the engines hold it for the
duration of a mutating operation, so operations on one pair are serialized
while unrelated pairs proceed concurrently.
"""

from __future__ import annotations

import threading

import structlog

from simpledex.errors import InsufficientLiquidity
from simpledex.models.types import normalize_address
from simpledex.pools.pair import PairKey
from simpledex.pools.pool import Pool

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of constant-product pools and liquidity positions."""

    def __init__(self) -> None:
        self._pools: dict[PairKey, Pool] = {}
        # (provider, pair) -> liquidity share; zero entries are dropped
        self._positions: dict[tuple[str, PairKey], int] = {}
        self._pair_locks: dict[PairKey, threading.Lock] = {}
        # Guards the three dicts above, never held during pool math
        self._guard = threading.Lock()

    def lock(self, pair: PairKey) -> threading.Lock:
        """Exclusive lock for one pair, created on first use."""
        with self._guard:
            pair_lock = self._pair_locks.get(pair)
            if pair_lock is None:
                pair_lock = threading.Lock()
                self._pair_locks[pair] = pair_lock
            return pair_lock

    def get_or_create_pool(self, token_x: str, token_y: str) -> Pool:
        """Return the pool for a pair, creating an empty one if unseen.

        Raises:
            InvalidPair: If the tokens are equal or malformed
        """
        pair = PairKey.of(token_x, token_y)
        with self._guard:
            pool = self._pools.get(pair)
            if pool is None:
                pool = Pool(pair=pair)
                self._pools[pair] = pool
                logger.debug("pool_created", pair=str(pair))
            return pool

    def get_pool(self, token_x: str, token_y: str) -> Pool | None:
        """Get the pool for a pair (order independent), or None."""
        pair = PairKey.of(token_x, token_y)
        with self._guard:
            return self._pools.get(pair)

    def get_liquidity(self, token_x: str, token_y: str) -> int:
        """Total liquidity of a pair, or 0 if the pair was never created."""
        pool = self.get_pool(token_x, token_y)
        return pool.total_liquidity if pool is not None else 0

    def position_of(self, provider: str, token_x: str, token_y: str) -> int:
        """Liquidity share recorded for `provider` in the pair."""
        return self.position(provider, PairKey.of(token_x, token_y))

    def position(self, provider: str, pair: PairKey) -> int:
        with self._guard:
            return self._positions.get((normalize_address(provider), pair), 0)

    def credit_position(self, provider: str, pair: PairKey, amount: int) -> None:
        key = (normalize_address(provider), pair)
        with self._guard:
            self._positions[key] = self._positions.get(key, 0) + amount

    def debit_position(self, provider: str, pair: PairKey, amount: int) -> None:
        """Reduce a provider's share.

        Raises:
            InsufficientLiquidity: If the position is smaller than amount
        """
        key = (normalize_address(provider), pair)
        with self._guard:
            current = self._positions.get(key, 0)
            if current < amount:
                raise InsufficientLiquidity(
                    f"Insufficient liquidity: position {current} < requested {amount}"
                )
            remaining = current - amount
            if remaining == 0:
                self._positions.pop(key, None)
            else:
                self._positions[key] = remaining

    def positions(self, pair: PairKey) -> dict[str, int]:
        """All providers holding a share of the pair."""
        with self._guard:
            return {prov: amt for (prov, p), amt in self._positions.items() if p == pair}

    def pools(self) -> list[Pool]:
        """Snapshot of all pools ordered by pair."""
        with self._guard:
            return [self._pools[pair] for pair in sorted(self._pools)]

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    def __repr__(self) -> str:
        return f"PoolRegistry({len(self._pools)} pools, {len(self._positions)} positions)"


__all__ = ["PoolRegistry"]
