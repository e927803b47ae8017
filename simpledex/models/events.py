"""Event records emitted by the exchange.

Field order matches the on-chain event signatures:

    LiquidityAdded(address provider, address tokenX, address tokenY, uint256 amountX, uint256 amountY)
    LiquidityRemoved(address provider, address tokenX, address tokenY, uint256 amountX, uint256 amountY)
    Swap(address trader, address tokenIn, address tokenOut, uint256 amountIn, uint256 amountOut)

Observers that index positionally (e.g. `args[4]` for a swap's output) rely
on this order.
"""

from __future__ import annotations

from dataclasses import asdict, astuple, dataclass
from typing import ClassVar

from eth_abi import encode  # type: ignore[attr-defined]

from simpledex.constants import EVENT_LIQUIDITY_ADDED, EVENT_LIQUIDITY_REMOVED, EVENT_SWAP

EVENT_ABI_TYPES = ["address", "address", "address", "uint256", "uint256"]


@dataclass(frozen=True)
class DexEvent:
    """Common behaviour of exchange events."""

    name: ClassVar[str] = ""

    @property
    def args(self) -> tuple[str | int, ...]:
        """Event arguments in signature order."""
        return astuple(self)

    def as_dict(self) -> dict[str, str | int]:
        return asdict(self)

    def signature(self) -> str:
        """Canonical event signature, e.g. Swap(address,address,address,uint256,uint256)."""
        return f"{self.name}({','.join(EVENT_ABI_TYPES)})"

    def encode_data(self) -> bytes:
        """ABI-encode the arguments as a non-indexed log payload."""
        return encode(EVENT_ABI_TYPES, list(self.args))


@dataclass(frozen=True)
class LiquidityAdded(DexEvent):
    """Provider deposited amount_x of token_x and amount_y of token_y."""

    name: ClassVar[str] = EVENT_LIQUIDITY_ADDED

    provider: str
    token_x: str
    token_y: str
    amount_x: int
    amount_y: int


@dataclass(frozen=True)
class LiquidityRemoved(DexEvent):
    """Provider withdrew amount_x of token_x and amount_y of token_y."""

    name: ClassVar[str] = EVENT_LIQUIDITY_REMOVED

    provider: str
    token_x: str
    token_y: str
    amount_x: int
    amount_y: int


@dataclass(frozen=True)
class Swap(DexEvent):
    """Trader sold amount_in of token_in for amount_out of token_out."""

    name: ClassVar[str] = EVENT_SWAP

    trader: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int


AnyEvent = LiquidityAdded | LiquidityRemoved | Swap
