"""SimpleDEX: the caller-facing exchange.

SimpleDEX composes the pool registry, the liquidity and swap engines, a
token ledger and an event sink behind four operations:

    add_liquidity(provider, token_x, token_y, amount_x, amount_y) -> liquidity
    remove_liquidity(provider, token_x, token_y, liquidity) -> (amount_x, amount_y)
    swap(trader, token_in, token_out, amount_in) -> amount_out
    get_liquidity(token_x, token_y) -> total liquidity

plus read-only reserve, position and price queries.
"""

from __future__ import annotations

import threading

import structlog

from simpledex.amm.constant_product import ConstantProduct
from simpledex.config import DexConfig
from simpledex.engine.liquidity import LiquidityEngine
from simpledex.engine.swap import SwapEngine
from simpledex.events import EventLog, EventSink
from simpledex.ledger.base import Ledger
from simpledex.ledger.memory import InMemoryLedger
from simpledex.pools.pair import PairKey
from simpledex.pools.registry import PoolRegistry

logger = structlog.get_logger()


class SimpleDEX:
    """Constant-product exchange over a token ledger.

    Args:
        ledger: Token ledger. If None, a fresh InMemoryLedger is used.
        events: Event sink. If None, an EventLog is created.
        config: Fee/account configuration. If None, read from the environment.
        registry: Pool registry. If None, starts empty.
    """

    def __init__(
        self,
        ledger: Ledger | None = None,
        events: EventSink | None = None,
        config: DexConfig | None = None,
        registry: PoolRegistry | None = None,
    ) -> None:
        self.config = config if config is not None else DexConfig.from_env()
        self.ledger = ledger if ledger is not None else InMemoryLedger()
        self.events = events if events is not None else EventLog()
        self.registry = registry if registry is not None else PoolRegistry()
        self.amm = ConstantProduct(self.config.fee_bps)

        self.liquidity_engine = LiquidityEngine(self.registry, self.ledger, self.events, self.config)
        self.swap_engine = SwapEngine(
            self.registry, self.ledger, self.events, self.config, amm=self.amm
        )

    @property
    def address(self) -> str:
        """Ledger account holding pooled reserves (the approval spender)."""
        return self.config.dex_address

    # --- Operations ---

    def add_liquidity(
        self,
        provider: str,
        token_x: str,
        token_y: str,
        amount_x_desired: int,
        amount_y_desired: int,
    ) -> int:
        """Deposit both tokens; returns liquidity minted. See LiquidityEngine."""
        return self.liquidity_engine.add_liquidity(
            provider, token_x, token_y, amount_x_desired, amount_y_desired
        )

    def remove_liquidity(
        self,
        provider: str,
        token_x: str,
        token_y: str,
        liquidity: int,
    ) -> tuple[int, int]:
        """Burn liquidity; returns (amount_x_out, amount_y_out). See LiquidityEngine."""
        return self.liquidity_engine.remove_liquidity(provider, token_x, token_y, liquidity)

    def swap(
        self,
        trader: str,
        token_in: str,
        token_out: str,
        amount_in: int,
        min_amount_out: int = 0,
    ) -> int:
        """Exact-input swap; returns amount_out. See SwapEngine."""
        return self.swap_engine.swap(trader, token_in, token_out, amount_in, min_amount_out)

    # --- Queries ---

    def get_liquidity(self, token_x: str, token_y: str) -> int:
        """Total liquidity of the pair (0 if never created)."""
        return self.registry.get_liquidity(token_x, token_y)

    def liquidity_of(self, provider: str, token_x: str, token_y: str) -> int:
        """Liquidity share held by provider in the pair."""
        return self.registry.position_of(provider, token_x, token_y)

    def get_reserves(self, token_x: str, token_y: str) -> tuple[int, int]:
        """Reserves in caller order (0, 0) if the pair has no pool."""
        pair = PairKey.of(token_x, token_y)
        with self.registry.lock(pair):
            pool = self.registry.get_pool(token_x, token_y)
            if pool is None:
                return 0, 0
            return pool.reserves_for(token_x)

    def quote(self, token_in: str, token_out: str, amount_in: int) -> int:
        """Current output for an exact input, without trading."""
        return self.swap_engine.quote(token_in, token_out, amount_in)

    def get_amount_in(self, token_in: str, token_out: str, amount_out: int) -> int:
        """Input needed for an exact output, without trading."""
        return self.swap_engine.get_amount_in(token_in, token_out, amount_out)

    def __repr__(self) -> str:
        return f"SimpleDEX(address={self.address}, fee_bps={self.config.fee_bps}, pools={self.registry.pool_count})"


_default_dex: SimpleDEX | None = None
_default_dex_lock = threading.Lock()


def get_default_dex() -> SimpleDEX:
    """Process-wide exchange instance backed by an in-memory ledger."""
    global _default_dex
    with _default_dex_lock:
        if _default_dex is None:
            _default_dex = SimpleDEX()
            logger.info("default_dex_created", address=_default_dex.address)
        return _default_dex


def reset_default_dex() -> None:
    """Drop the process-wide instance (tests, server restarts)."""
    global _default_dex
    with _default_dex_lock:
        _default_dex = None
