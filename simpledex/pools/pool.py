"""Pool record for a constant-product pair."""

from __future__ import annotations

from dataclasses import dataclass

from simpledex.pools.pair import PairKey


@dataclass
class Pool:
    """Reserves and liquidity supply of one pair.

    Attributes:
        pair: Canonical pair; reserve0 belongs to pair.token0
        reserve0: Pooled amount of token0
        reserve1: Pooled amount of token1
        total_liquidity: Sum of all provider shares

    Invariant: total_liquidity == 0 exactly when both reserves are 0.
    """

    pair: PairKey
    reserve0: int = 0
    reserve1: int = 0
    total_liquidity: int = 0

    def __post_init__(self) -> None:
        self.check_invariants()

    @property
    def token0(self) -> str:
        return self.pair.token0

    @property
    def token1(self) -> str:
        return self.pair.token1

    def is_empty(self) -> bool:
        return self.total_liquidity == 0

    def reserve_of(self, token: str) -> int:
        return self.reserve0 if self.pair.is_token0(token) else self.reserve1

    def reserves_for(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        if self.pair.is_token0(token_in):
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0

    def set_reserves_for(
        self,
        token_in: str,
        reserve_in: int,
        reserve_out: int,
        total_liquidity: int | None = None,
    ) -> None:
        """Store reserves given in (token_in, other) orientation.

        The new state is validated before anything is assigned, so a rejected
        update leaves the pool unchanged.

        Args:
            token_in: Token whose reserve is reserve_in
            reserve_in: New reserve of token_in
            reserve_out: New reserve of the other token
            total_liquidity: New liquidity supply (default: unchanged)

        Raises:
            ValueError: If the new state breaks the pool invariants
        """
        if self.pair.is_token0(token_in):
            reserve0, reserve1 = reserve_in, reserve_out
        else:
            reserve0, reserve1 = reserve_out, reserve_in
        total = self.total_liquidity if total_liquidity is None else total_liquidity
        _check_state(reserve0, reserve1, total)
        self.reserve0, self.reserve1, self.total_liquidity = reserve0, reserve1, total

    def constant_product(self) -> int:
        """k = reserve0 * reserve1."""
        return self.reserve0 * self.reserve1

    def check_invariants(self) -> None:
        """Raise ValueError if the record is inconsistent."""
        _check_state(self.reserve0, self.reserve1, self.total_liquidity)

    def __repr__(self) -> str:
        return (
            f"Pool(pair={self.pair}, reserves=({self.reserve0}, {self.reserve1}), "
            f"liquidity={self.total_liquidity})"
        )


def _check_state(reserve0: int, reserve1: int, total_liquidity: int) -> None:
    """Invariant: non-negative, and total_liquidity == 0 exactly when both reserves are 0."""
    if reserve0 < 0 or reserve1 < 0:
        raise ValueError(f"Reserves must be non-negative: ({reserve0}, {reserve1})")
    if total_liquidity < 0:
        raise ValueError(f"Liquidity must be non-negative: {total_liquidity}")
    reserves_empty = reserve0 == 0 and reserve1 == 0
    if (total_liquidity == 0) != reserves_empty:
        raise ValueError(
            f"Liquidity/reserve mismatch: liquidity={total_liquidity}, "
            f"reserves=({reserve0}, {reserve1})"
        )
