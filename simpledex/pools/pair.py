"""Canonical, order-independent identity of a two-token pool."""

from __future__ import annotations

from dataclasses import dataclass

from simpledex.errors import InvalidPair
from simpledex.models.types import is_valid_address, normalize_address


def token_order_key(token: str) -> int:
    """Total order over token identifiers: the address as an integer."""
    return int(token, 16)


@dataclass(frozen=True, order=True)
class PairKey:
    """Two distinct tokens with token0 < token1 by address value.

    Build with PairKey.of(); the constructor validates but does not sort.
    """

    token0: str
    token1: str

    def __post_init__(self) -> None:
        if self.token0 == self.token1:
            raise InvalidPair(f"Pair tokens must differ: {self.token0}")
        if token_order_key(self.token0) > token_order_key(self.token1):
            raise InvalidPair(f"Pair not in canonical order: {self.token0} > {self.token1}")

    @classmethod
    def of(cls, token_x: str, token_y: str) -> PairKey:
        """Canonicalize (token_x, token_y); (A, B) and (B, A) give the same key.

        Raises:
            InvalidPair: If either token is not an address or both are equal
        """
        x = normalize_address(token_x)
        y = normalize_address(token_y)
        for token in (x, y):
            if not is_valid_address(token):
                raise InvalidPair(f"Invalid token address: {token}")
        if x == y:
            raise InvalidPair(f"Pair tokens must differ: {x}")
        if token_order_key(x) > token_order_key(y):
            x, y = y, x
        return cls(x, y)

    def contains(self, token: str) -> bool:
        return normalize_address(token) in (self.token0, self.token1)

    def is_token0(self, token: str) -> bool:
        """True if `token` is the lower-ordered side of the pair.

        Raises:
            InvalidPair: If token is not part of this pair
        """
        token_norm = normalize_address(token)
        if token_norm == self.token0:
            return True
        if token_norm == self.token1:
            return False
        raise InvalidPair(f"Token {token} not in pair {self}")

    def other(self, token: str) -> str:
        return self.token1 if self.is_token0(token) else self.token0

    def __str__(self) -> str:
        return f"{self.token0[-8:]}/{self.token1[-8:]}"
