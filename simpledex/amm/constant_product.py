"""Constant-product AMM math.

Pools price swaps with x * y = k. A fee of fee_bps is taken from the input
first, rounding down:

    in_after_fee = in * fee_mult // 10000
    amount_out = res_out * in_after_fee // (res_in + in_after_fee)

where fee_mult = 10000 - fee_bps (9970 for the default 0.3%). The whole
input, fee included, is credited to the pool, so k never decreases.

All functions are pure integer math; rounding always favours the pool.
"""

from __future__ import annotations

from dataclasses import dataclass

from simpledex.constants import BPS_DENOMINATOR, DEFAULT_FEE_BPS
from simpledex.safe_int import S


@dataclass(frozen=True)
class SwapQuote:
    """Result of pricing a swap against a pair of reserves."""

    amount_in: int
    amount_out: int
    reserve_in_after: int
    reserve_out_after: int


class ConstantProduct:
    """Constant-product math with a fixed input fee.

    Formula: amount_out = reserve_out * a // (reserve_in + a), where
    a = amount_in * 9970 // 10000 is the input left after the 0.3% fee.
    """

    def __init__(self, fee_bps: int = DEFAULT_FEE_BPS) -> None:
        if not (0 <= fee_bps < BPS_DENOMINATOR):
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}): {fee_bps}")
        self.fee_bps = fee_bps

    @property
    def fee_multiplier(self) -> int:
        return BPS_DENOMINATOR - self.fee_bps

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount for an exact input.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount (0 if the input or either reserve is empty)
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_after_fee = S(amount_in) * self.fee_multiplier // BPS_DENOMINATOR
        if not amount_in_after_fee:
            return 0

        numerator = S(reserve_out) * amount_in_after_fee
        denominator = S(reserve_in) + amount_in_after_fee

        return (numerator // denominator).value

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int | None:
        """Calculate the input required for an exact output.

        The smallest input whose fee-adjusted amount still buys amount_out:

            a = ceil(res_in * out / (res_out - out))
            amount_in = ceil(a * 10000 / fee_mult)

        Returns:
            Required input, or None if amount_out cannot be drawn from the reserve
        """
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return None
        if amount_out >= reserve_out:
            return None

        needed_after_fee = (S(reserve_in) * amount_out).ceiling_div(S(reserve_out) - amount_out)
        return (needed_after_fee * BPS_DENOMINATOR).ceiling_div(self.fee_multiplier).value

    def quote_swap(self, amount_in: int, reserve_in: int, reserve_out: int) -> SwapQuote:
        """Price a swap and compute the reserves it would leave behind."""
        amount_out = self.get_amount_out(amount_in, reserve_in, reserve_out)
        return SwapQuote(
            amount_in=amount_in,
            amount_out=amount_out,
            reserve_in_after=(S(reserve_in) + amount_in).value,
            reserve_out_after=(S(reserve_out) - amount_out).value,
        )

    def __repr__(self) -> str:
        return f"ConstantProduct(fee_bps={self.fee_bps})"


def liquidity_to_mint(
    amount_x: int,
    amount_y: int,
    reserve_x: int,
    reserve_y: int,
    total_liquidity: int,
) -> int:
    """Liquidity units for a deposit.

    First deposit into an empty pool mints amount_x. Later deposits mint the
    smaller of the two proportional shares:

        min(amount_x * T // reserve_x, amount_y * T // reserve_y)

    so an unbalanced deposit never dilutes existing providers; the excess of
    the larger side stays in the pool.
    """
    if total_liquidity == 0:
        return amount_x
    share_x = S(amount_x) * total_liquidity // reserve_x
    share_y = S(amount_y) * total_liquidity // reserve_y
    return share_x.min(share_y).value


def amounts_for_liquidity(
    liquidity: int,
    reserve_x: int,
    reserve_y: int,
    total_liquidity: int,
) -> tuple[int, int]:
    """Reserve amounts redeemed by burning `liquidity` units (floor division).

    Raises:
        DivisionByZero: If the pool has no liquidity
    """
    amount_x = S(reserve_x) * liquidity // total_liquidity
    amount_y = S(reserve_y) * liquidity // total_liquidity
    return amount_x.value, amount_y.value
