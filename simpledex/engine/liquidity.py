"""Liquidity engine: deposits into and withdrawals from pools.

Deposit:
    - First deposit into an empty pool mints liquidity equal to the X-side amount
    - Later deposits mint min(x * T / Rx, y * T / Ry); the full desired
      amounts are pulled and any excess on one side stays in the pool
Withdrawal:
    - Burns liquidity units for floor(R * L / T) of each reserve

Both operations hold the pair lock while they apply ledger transfers and pool
updates inside one ledger atomic section; the event is emitted after the
lock is released.
"""

from __future__ import annotations

import structlog

from simpledex.amm.constant_product import amounts_for_liquidity, liquidity_to_mint
from simpledex.engine.base import BaseEngine
from simpledex.errors import DexError, InsufficientLiquidity
from simpledex.models.events import LiquidityAdded, LiquidityRemoved
from simpledex.models.types import normalize_address, short
from simpledex.pools.pair import PairKey
from simpledex.safe_int import S

logger = structlog.get_logger()


class LiquidityEngine(BaseEngine):
    """Adds and removes pool liquidity on behalf of providers."""

    def add_liquidity(
        self,
        provider: str,
        token_x: str,
        token_y: str,
        amount_x_desired: int,
        amount_y_desired: int,
    ) -> int:
        """Deposit both tokens of a pair and mint liquidity to the provider.

        The provider must have approved the DEX account for both amounts.

        Args:
            provider: Depositing account
            token_x: First token (caller order)
            token_y: Second token (caller order)
            amount_x_desired: Amount of token_x to deposit
            amount_y_desired: Amount of token_y to deposit

        Returns:
            Liquidity units minted

        Raises:
            InvalidPair: token_x == token_y
            ZeroAmount: Either amount <= 0
            InsufficientAllowance: Allowance below a deposit amount
            InsufficientBalance: Balance below a deposit amount
            InsufficientLiquidity: Deposit too small to mint any liquidity
        """
        pair = PairKey.of(token_x, token_y)
        self._require_positive("amount_x_desired", amount_x_desired)
        self._require_positive("amount_y_desired", amount_y_desired)
        provider = normalize_address(provider)
        token_x = normalize_address(token_x)
        token_y = normalize_address(token_y)

        with self.registry.lock(pair):
            try:
                minted = self._add(provider, pair, token_x, token_y, amount_x_desired, amount_y_desired)
            except DexError as e:
                logger.info(
                    "add_liquidity_rejected",
                    provider=short(provider),
                    pair=str(pair),
                    error=type(e).__name__,
                    detail=str(e),
                )
                raise

        self.events.emit(
            LiquidityAdded(
                provider=provider,
                token_x=token_x,
                token_y=token_y,
                amount_x=amount_x_desired,
                amount_y=amount_y_desired,
            )
        )

        logger.info(
            "liquidity_added",
            provider=short(provider),
            pair=str(pair),
            amount_x=amount_x_desired,
            amount_y=amount_y_desired,
            liquidity=minted,
        )
        return minted

    def _add(
        self,
        provider: str,
        pair: PairKey,
        token_x: str,
        token_y: str,
        amount_x: int,
        amount_y: int,
    ) -> int:
        pool = self.registry.get_pool(token_x, token_y)
        if pool is None:
            reserve_x, reserve_y, total = 0, 0, 0
        else:
            reserve_x, reserve_y = pool.reserves_for(token_x)
            total = pool.total_liquidity

        minted = liquidity_to_mint(amount_x, amount_y, reserve_x, reserve_y, total)
        if minted <= 0:
            raise InsufficientLiquidity("Insufficient liquidity minted")

        new_reserve_x = (S(reserve_x) + amount_x).to_uint256()
        new_reserve_y = (S(reserve_y) + amount_y).to_uint256()
        new_total = (S(total) + minted).to_uint256()

        with self.ledger.atomic():
            self.ledger.transfer_from(token_x, self.dex_address, provider, self.dex_address, amount_x)
            self.ledger.transfer_from(token_y, self.dex_address, provider, self.dex_address, amount_y)

            # Pool record is only created once the deposit is secured
            pool = self.registry.get_or_create_pool(token_x, token_y)
            pool.set_reserves_for(token_x, new_reserve_x, new_reserve_y, new_total)
            self.registry.credit_position(provider, pair, minted)

        return minted

    def remove_liquidity(
        self,
        provider: str,
        token_x: str,
        token_y: str,
        liquidity: int,
    ) -> tuple[int, int]:
        """Burn liquidity and pay out the proportional share of both reserves.

        Args:
            provider: Withdrawing account
            token_x: First token (caller order)
            token_y: Second token (caller order)
            liquidity: Liquidity units to burn

        Returns:
            (amount_x_out, amount_y_out) in caller order; a side may round down
            to 0 on a lopsided pool

        Raises:
            InvalidPair: token_x == token_y
            ZeroAmount: liquidity <= 0
            InsufficientLiquidity: liquidity exceeds the provider's position
                or the pool supply
        """
        pair = PairKey.of(token_x, token_y)
        self._require_positive("liquidity", liquidity)
        provider = normalize_address(provider)
        token_x = normalize_address(token_x)
        token_y = normalize_address(token_y)

        with self.registry.lock(pair):
            try:
                amount_x, amount_y = self._remove(provider, pair, token_x, token_y, liquidity)
            except DexError as e:
                logger.info(
                    "remove_liquidity_rejected",
                    provider=short(provider),
                    pair=str(pair),
                    error=type(e).__name__,
                    detail=str(e),
                )
                raise

        self.events.emit(
            LiquidityRemoved(
                provider=provider,
                token_x=token_x,
                token_y=token_y,
                amount_x=amount_x,
                amount_y=amount_y,
            )
        )

        logger.info(
            "liquidity_removed",
            provider=short(provider),
            pair=str(pair),
            amount_x=amount_x,
            amount_y=amount_y,
            liquidity=liquidity,
        )
        return amount_x, amount_y

    def _remove(
        self,
        provider: str,
        pair: PairKey,
        token_x: str,
        token_y: str,
        liquidity: int,
    ) -> tuple[int, int]:
        pool = self.registry.get_pool(token_x, token_y)
        if pool is None or pool.is_empty():
            raise InsufficientLiquidity()

        position = self.registry.position(provider, pair)
        if liquidity > position or liquidity > pool.total_liquidity:
            raise InsufficientLiquidity()

        reserve_x, reserve_y = pool.reserves_for(token_x)
        amount_x, amount_y = amounts_for_liquidity(liquidity, reserve_x, reserve_y, pool.total_liquidity)

        with self.ledger.atomic():
            self.ledger.transfer(token_x, self.dex_address, provider, amount_x)
            self.ledger.transfer(token_y, self.dex_address, provider, amount_y)
            pool.set_reserves_for(
                token_x,
                (S(reserve_x) - amount_x).value,
                (S(reserve_y) - amount_y).value,
                (S(pool.total_liquidity) - liquidity).value,
            )
            self.registry.debit_position(provider, pair, liquidity)

        return amount_x, amount_y


__all__ = ["LiquidityEngine"]
