"""SimpleDEX error classes.

Ledger errors map to the ERC20 custom errors the pools surface verbatim;
pool errors map to the revert reasons of the exchange itself.
"""


class DexError(Exception):
    """Base error for exchange operations."""

    default_message = "DEX operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class LedgerError(DexError):
    """A token transfer was refused by the ledger."""

    default_message = "Ledger transfer failed"


class InsufficientBalance(LedgerError):
    """Sender balance is below the transfer amount (ERC20InsufficientBalance)."""

    default_message = "Insufficient balance"


class InsufficientAllowance(LedgerError):
    """Spender allowance is below the transfer amount (ERC20InsufficientAllowance)."""

    default_message = "Insufficient allowance"


class InsufficientLiquidity(DexError):
    """Removal or swap exceeds the available reserve or position."""

    default_message = "Insufficient liquidity"


class InvalidPair(DexError):
    """Both sides of the pair are the same token, or a token is malformed."""

    default_message = "Invalid pair"


class ZeroAmount(DexError):
    """An amount argument is zero or negative."""

    default_message = "Amount must be positive"


class SlippageExceeded(DexError):
    """Swap output fell below the caller's minimum."""

    default_message = "Output below minimum"
