"""Base class with shared engine utilities."""

from __future__ import annotations

from simpledex.config import DEFAULT_DEX_CONFIG, DexConfig
from simpledex.errors import ZeroAmount
from simpledex.events import EventSink
from simpledex.ledger.base import Ledger
from simpledex.pools.registry import PoolRegistry
from simpledex.safe_int import check_uint256


class BaseEngine:
    """State shared by the liquidity and swap engines.

    Args:
        registry: Owner of pool records and positions
        ledger: Token ledger transfers go through
        events: Sink that receives one event per successful operation
        config: Fee and account configuration
    """

    def __init__(
        self,
        registry: PoolRegistry,
        ledger: Ledger,
        events: EventSink,
        config: DexConfig = DEFAULT_DEX_CONFIG,
    ) -> None:
        self.registry = registry
        self.ledger = ledger
        self.events = events
        self.config = config

    @property
    def dex_address(self) -> str:
        """Ledger account holding the pooled reserves."""
        return self.config.dex_address

    def _require_positive(self, name: str, amount: int) -> int:
        """Validate an amount argument.

        Raises:
            ZeroAmount: If amount <= 0
            Uint256Overflow: If amount exceeds uint256 (when enforced)
        """
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError(f"{name} must be int, got {type(amount).__name__}")
        if amount <= 0:
            raise ZeroAmount(f"{name} must be positive: {amount}")
        if self.config.enforce_uint256:
            check_uint256(name, amount)
        return amount
