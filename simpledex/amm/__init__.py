"""AMM math package."""

from simpledex.amm.constant_product import (
    ConstantProduct,
    SwapQuote,
    amounts_for_liquidity,
    liquidity_to_mint,
)

__all__ = [
    "ConstantProduct",
    "SwapQuote",
    "amounts_for_liquidity",
    "liquidity_to_mint",
]
