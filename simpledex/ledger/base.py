"""Ledger adapter interface.

The pool engines never look inside token storage; they move value only
through this protocol. Implementations must raise InsufficientAllowance /
InsufficientBalance (simpledex.errors) and leave state untouched when a
transfer is refused.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable


@runtime_checkable
class Ledger(Protocol):
    """Token balances and allowances for fungible tokens."""

    def balance_of(self, token: str, account: str) -> int:
        """Balance of `account` in `token` (0 if unknown)."""
        ...

    def allowance(self, token: str, owner: str, spender: str) -> int:
        """Amount `spender` may still pull from `owner`."""
        ...

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """Move `amount` from sender to recipient.

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        ...

    def transfer_from(
        self,
        token: str,
        spender: str,
        owner: str,
        recipient: str,
        amount: int,
    ) -> None:
        """Move `amount` from owner to recipient, spending spender's allowance.

        Raises:
            InsufficientAllowance: If allowance is below amount (checked first)
            InsufficientBalance: If owner holds less than amount
        """
        ...

    def atomic(self) -> AbstractContextManager[None]:
        """Group transfers so that an exception inside the block undoes all of them."""
        ...


__all__ = ["Ledger"]
