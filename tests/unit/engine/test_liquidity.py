"""Tests for LiquidityEngine deposits and withdrawals."""

import pytest

from simpledex.constants import UINT256_MAX
from simpledex.engine.liquidity import LiquidityEngine
from simpledex.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    InsufficientLiquidity,
    InvalidPair,
    ZeroAmount,
)
from simpledex.models.events import LiquidityAdded, LiquidityRemoved
from simpledex.safe_int import Uint256Overflow
from tests.helpers import DEX, TOKEN_A, TOKEN_B, USER1, USER2


@pytest.fixture
def engine(registry, ledger, events, config) -> LiquidityEngine:
    return LiquidityEngine(registry, ledger, events, config)


@pytest.fixture
def funded(ledger):
    """USER1 and USER2 hold 10,000 of each token with the exchange approved."""
    for user in (USER1, USER2):
        for token in (TOKEN_A, TOKEN_B):
            ledger.mint(token, user, 10_000)
            ledger.approve(token, user, DEX, 10_000)
    return ledger


class TestAddLiquidity:
    def test_first_deposit_mints_x_amount(self, engine, funded, registry):
        minted = engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 400)
        assert minted == 1000
        pool = registry.get_pool(TOKEN_A, TOKEN_B)
        assert pool.reserves_for(TOKEN_A) == (1000, 400)
        assert pool.total_liquidity == 1000
        assert registry.position_of(USER1, TOKEN_A, TOKEN_B) == 1000

    def test_first_deposit_in_reverse_order(self, engine, funded, registry):
        """Caller order decides which amount becomes the initial supply."""
        minted = engine.add_liquidity(USER1, TOKEN_B, TOKEN_A, 400, 1000)
        assert minted == 400
        assert registry.get_pool(TOKEN_A, TOKEN_B).reserves_for(TOKEN_B) == (400, 1000)

    def test_deposit_pulls_tokens(self, engine, funded):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1000)
        assert funded.balance_of(TOKEN_A, USER1) == 9000
        assert funded.balance_of(TOKEN_A, DEX) == 1000
        assert funded.allowance(TOKEN_A, USER1, DEX) == 9000

    def test_proportional_second_deposit(self, engine, funded, registry):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1000)
        minted = engine.add_liquidity(USER2, TOKEN_B, TOKEN_A, 500, 500)
        assert minted == 500
        assert registry.get_liquidity(TOKEN_A, TOKEN_B) == 1500
        assert registry.position_of(USER2, TOKEN_A, TOKEN_B) == 500

    def test_unbalanced_deposit_donates_surplus(self, engine, funded, registry):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1000)
        minted = engine.add_liquidity(USER2, TOKEN_A, TOKEN_B, 500, 1000)
        assert minted == 500
        pool = registry.get_pool(TOKEN_A, TOKEN_B)
        assert pool.reserves_for(TOKEN_A) == (1500, 2000)
        assert funded.balance_of(TOKEN_B, USER2) == 9000

    def test_emits_event_in_caller_order(self, engine, funded, events):
        engine.add_liquidity(USER1, TOKEN_B, TOKEN_A, 300, 700)
        assert events.last() == LiquidityAdded(
            provider=USER1, token_x=TOKEN_B, token_y=TOKEN_A, amount_x=300, amount_y=700
        )

    def test_deposit_too_small_to_mint(self, engine, funded, registry):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1, 1000)
        with pytest.raises(InsufficientLiquidity, match="minted"):
            engine.add_liquidity(USER2, TOKEN_A, TOKEN_B, 1, 1)
        assert funded.balance_of(TOKEN_A, USER2) == 10_000
        assert registry.get_liquidity(TOKEN_A, TOKEN_B) == 1

    def test_identical_tokens(self, engine, funded):
        with pytest.raises(InvalidPair):
            engine.add_liquidity(USER1, TOKEN_A, TOKEN_A, 10, 10)

    @pytest.mark.parametrize("amounts", [(0, 10), (10, 0), (-1, 10)])
    def test_non_positive_amount(self, engine, funded, amounts):
        with pytest.raises(ZeroAmount):
            engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, *amounts)

    def test_amount_beyond_uint256(self, engine, funded):
        with pytest.raises(Uint256Overflow):
            engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, UINT256_MAX + 1, 10)

    def test_non_int_amount(self, engine, funded):
        with pytest.raises(TypeError):
            engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 10.0, 10)

    def test_missing_allowance_creates_no_pool(self, engine, ledger, registry, events):
        ledger.mint(TOKEN_A, USER1, 100)
        ledger.mint(TOKEN_B, USER1, 100)
        with pytest.raises(InsufficientAllowance):
            engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 100, 100)
        assert registry.get_pool(TOKEN_A, TOKEN_B) is None
        assert len(events) == 0

    def test_second_leg_failure_rolls_back_first(self, engine, ledger, registry):
        """Token Y short: the pulled token X is returned and no pool exists."""
        ledger.mint(TOKEN_A, USER1, 100)
        ledger.mint(TOKEN_B, USER1, 50)
        ledger.approve(TOKEN_A, USER1, DEX, 100)
        ledger.approve(TOKEN_B, USER1, DEX, 100)
        with pytest.raises(InsufficientBalance):
            engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 100, 100)
        assert ledger.balance_of(TOKEN_A, USER1) == 100
        assert ledger.allowance(TOKEN_A, USER1, DEX) == 100
        assert ledger.balance_of(TOKEN_A, DEX) == 0
        assert registry.get_pool(TOKEN_A, TOKEN_B) is None


class TestRemoveLiquidity:
    def test_burn_half(self, engine, funded, registry):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1000)
        assert engine.remove_liquidity(USER1, TOKEN_A, TOKEN_B, 500) == (500, 500)
        assert registry.get_liquidity(TOKEN_A, TOKEN_B) == 500
        assert registry.position_of(USER1, TOKEN_A, TOKEN_B) == 500
        assert funded.balance_of(TOKEN_A, USER1) == 9500

    def test_amounts_in_caller_order(self, engine, funded):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 400)
        assert engine.remove_liquidity(USER1, TOKEN_B, TOKEN_A, 500) == (200, 500)

    def test_burn_everything_empties_pool(self, engine, funded, registry):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1000)
        engine.remove_liquidity(USER1, TOKEN_A, TOKEN_B, 1000)
        pool = registry.get_pool(TOKEN_A, TOKEN_B)
        assert pool.is_empty()
        assert (pool.reserve0, pool.reserve1) == (0, 0)
        assert funded.balance_of(TOKEN_A, DEX) == 0

    def test_emits_event(self, engine, funded, events):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1000)
        engine.remove_liquidity(USER1, TOKEN_A, TOKEN_B, 250)
        assert events.last("LiquidityRemoved") == LiquidityRemoved(
            provider=USER1, token_x=TOKEN_A, token_y=TOKEN_B, amount_x=250, amount_y=250
        )

    def test_more_than_position(self, engine, funded):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1000)
        with pytest.raises(InsufficientLiquidity, match="^Insufficient liquidity$"):
            engine.remove_liquidity(USER1, TOKEN_A, TOKEN_B, 1500)

    def test_other_providers_share_is_protected(self, engine, funded):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1000)
        with pytest.raises(InsufficientLiquidity):
            engine.remove_liquidity(USER2, TOKEN_A, TOKEN_B, 1)

    def test_no_pool(self, engine):
        with pytest.raises(InsufficientLiquidity):
            engine.remove_liquidity(USER1, TOKEN_A, TOKEN_B, 1)

    def test_zero_liquidity(self, engine, funded):
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1000)
        with pytest.raises(ZeroAmount):
            engine.remove_liquidity(USER1, TOKEN_A, TOKEN_B, 0)

    def test_lopsided_pool_pays_zero_on_one_side(self, engine, funded, registry, events):
        """Burning 1 of 1000 against reserves 1000/1 floors the B side to 0."""
        engine.add_liquidity(USER1, TOKEN_A, TOKEN_B, 1000, 1)

        assert engine.remove_liquidity(USER1, TOKEN_A, TOKEN_B, 1) == (1, 0)

        pool = registry.get_pool(TOKEN_A, TOKEN_B)
        assert pool.reserves_for(TOKEN_A) == (999, 1)
        assert pool.total_liquidity == 999
        assert registry.position_of(USER1, TOKEN_A, TOKEN_B) == 999
        assert funded.balance_of(TOKEN_A, USER1) == 9001
        assert funded.balance_of(TOKEN_B, USER1) == 9999
        assert events.last("LiquidityRemoved").amount_y == 0
