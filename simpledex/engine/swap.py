"""Swap engine: exact-input trades against a constant-product pool.

The trader's input, fee included, is credited to the pool and the output is
paid from the opposite reserve, so reserve_in * reserve_out never
decreases. Input pull, output payment and reserve update happen inside one
ledger atomic section under the pair lock; the Swap event is emitted once
the lock is released.
"""

from __future__ import annotations

import structlog

from simpledex.amm.constant_product import ConstantProduct
from simpledex.config import DEFAULT_DEX_CONFIG, DexConfig
from simpledex.engine.base import BaseEngine
from simpledex.errors import DexError, InsufficientLiquidity, SlippageExceeded
from simpledex.events import EventSink
from simpledex.ledger.base import Ledger
from simpledex.models.events import Swap
from simpledex.models.types import normalize_address, short
from simpledex.pools.pair import PairKey
from simpledex.pools.pool import Pool
from simpledex.pools.registry import PoolRegistry
from simpledex.safe_int import check_uint256

logger = structlog.get_logger()


class SwapEngine(BaseEngine):
    """Prices and executes swaps.

    Args:
        registry: Owner of pool records
        ledger: Token ledger transfers go through
        events: Sink that receives a Swap event per executed trade
        config: Fee and account configuration
        amm: Pricing math; defaults to ConstantProduct(config.fee_bps)
    """

    def __init__(
        self,
        registry: PoolRegistry,
        ledger: Ledger,
        events: EventSink,
        config: DexConfig = DEFAULT_DEX_CONFIG,
        amm: ConstantProduct | None = None,
    ) -> None:
        super().__init__(registry, ledger, events, config)
        self.amm = amm if amm is not None else ConstantProduct(config.fee_bps)

    def swap(
        self,
        trader: str,
        token_in: str,
        token_out: str,
        amount_in: int,
        min_amount_out: int = 0,
    ) -> int:
        """Sell exactly amount_in of token_in for token_out.

        Args:
            trader: Account selling token_in; must have approved the DEX account
            token_in: Token sold
            token_out: Token bought
            amount_in: Exact input amount
            min_amount_out: Reject the trade if output would be lower (0 disables)

        Returns:
            Output amount paid to the trader

        Raises:
            InvalidPair: token_in == token_out
            ZeroAmount: amount_in <= 0
            InsufficientLiquidity: No pool, empty output reserve, or output
                that rounds to zero or would drain the reserve
            SlippageExceeded: Output below min_amount_out
            InsufficientAllowance / InsufficientBalance: Input pull refused
        """
        pair = PairKey.of(token_in, token_out)
        self._require_positive("amount_in", amount_in)
        check_uint256("min_amount_out", min_amount_out)
        trader = normalize_address(trader)
        token_in = normalize_address(token_in)
        token_out = normalize_address(token_out)

        with self.registry.lock(pair):
            try:
                amount_out = self._swap(trader, token_in, token_out, amount_in, min_amount_out)
            except DexError as e:
                logger.info(
                    "swap_rejected",
                    trader=short(trader),
                    token_in=short(token_in),
                    token_out=short(token_out),
                    amount_in=amount_in,
                    error=type(e).__name__,
                    detail=str(e),
                )
                raise

        self.events.emit(
            Swap(
                trader=trader,
                token_in=token_in,
                token_out=token_out,
                amount_in=amount_in,
                amount_out=amount_out,
            )
        )

        logger.info(
            "swap_executed",
            trader=short(trader),
            token_in=short(token_in),
            token_out=short(token_out),
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return amount_out

    def _swap(
        self,
        trader: str,
        token_in: str,
        token_out: str,
        amount_in: int,
        min_amount_out: int,
    ) -> int:
        pool = self._require_pool(token_in, token_out)
        reserve_in, reserve_out = pool.reserves_for(token_in)

        quote = self.amm.quote_swap(amount_in, reserve_in, reserve_out)
        amount_out = quote.amount_out
        if amount_out == 0 or amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Insufficient liquidity: output {amount_out} against reserve {reserve_out}"
            )
        if amount_out < min_amount_out:
            raise SlippageExceeded(f"Output {amount_out} below minimum {min_amount_out}")

        k_before = reserve_in * reserve_out
        k_after = quote.reserve_in_after * quote.reserve_out_after
        if k_after < k_before:
            raise InsufficientLiquidity(f"Constant product would decrease: {k_after} < {k_before}")

        if self.config.enforce_uint256:
            check_uint256("reserve_in", quote.reserve_in_after)

        with self.ledger.atomic():
            self.ledger.transfer_from(token_in, self.dex_address, trader, self.dex_address, amount_in)
            self.ledger.transfer(token_out, self.dex_address, trader, amount_out)
            pool.set_reserves_for(token_in, quote.reserve_in_after, quote.reserve_out_after)

        logger.debug(
            "swap_reserves_updated",
            pair=str(pool.pair),
            k_before=k_before,
            k_after=k_after,
        )
        return amount_out

    def _require_pool(self, token_in: str, token_out: str) -> Pool:
        pool = self.registry.get_pool(token_in, token_out)
        if pool is None:
            raise InsufficientLiquidity("Insufficient liquidity: no pool for pair")
        _, reserve_out = pool.reserves_for(token_in)
        if reserve_out == 0:
            raise InsufficientLiquidity()
        return pool

    def quote(self, token_in: str, token_out: str, amount_in: int) -> int:
        """Output a swap of amount_in would currently receive (no state change).

        Raises:
            InvalidPair, ZeroAmount, InsufficientLiquidity: As for swap()
        """
        pair = PairKey.of(token_in, token_out)
        self._require_positive("amount_in", amount_in)
        with self.registry.lock(pair):
            pool = self._require_pool(token_in, token_out)
            reserve_in, reserve_out = pool.reserves_for(token_in)
        return self.amm.get_amount_out(amount_in, reserve_in, reserve_out)

    def get_amount_in(self, token_in: str, token_out: str, amount_out: int) -> int:
        """Input required to receive at least amount_out (no state change).

        Raises:
            InsufficientLiquidity: amount_out cannot be drawn from the reserve
        """
        pair = PairKey.of(token_in, token_out)
        self._require_positive("amount_out", amount_out)
        with self.registry.lock(pair):
            pool = self._require_pool(token_in, token_out)
            reserve_in, reserve_out = pool.reserves_for(token_in)
        amount_in = self.amm.get_amount_in(amount_out, reserve_in, reserve_out)
        if amount_in is None:
            raise InsufficientLiquidity(
                f"Insufficient liquidity: cannot draw {amount_out} from reserve {reserve_out}"
            )
        return amount_in


__all__ = ["SwapEngine"]
