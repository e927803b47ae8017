"""In-memory ERC20-style ledger.

Tracks (token, account) -> balance and (token, owner, spender) -> allowance
in plain dicts, mirroring the MockERC20 tokens the exchange is exercised
against: mint, approve, transfer and transferFrom with allowance checked
before balance.

Atomic sections keep a journal of the previous value of every entry they
touch; if the block raises, entries are restored in reverse order.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from simpledex.errors import InsufficientAllowance, InsufficientBalance, ZeroAmount
from simpledex.models.types import normalize_address
from simpledex.safe_int import S, check_uint256

logger = structlog.get_logger()

_BalanceKey = tuple[str, str]
_AllowanceKey = tuple[str, str, str]
# (table, key, previous value or None if absent)
_JournalEntry = tuple[str, tuple[str, ...], int | None]


class InMemoryLedger:
    """Deterministic balance and allowance table.

    Note: balances are kept in plain dicts. Zero balances are dropped to
    keep tables sparse, so `balances()` only reports holders.
    """

    def __init__(self) -> None:
        self._balances: dict[_BalanceKey, int] = {}
        self._allowances: dict[_AllowanceKey, int] = {}
        self._supply: dict[str, int] = {}
        self._lock = threading.RLock()
        # Stack of journals, one per open atomic() block on the owning thread
        self._journals: list[list[_JournalEntry]] = []

    # --- Queries ---

    def balance_of(self, token: str, account: str) -> int:
        key = (normalize_address(token), normalize_address(account))
        with self._lock:
            return self._balances.get(key, 0)

    def allowance(self, token: str, owner: str, spender: str) -> int:
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        with self._lock:
            return self._allowances.get(key, 0)

    def total_supply(self, token: str) -> int:
        with self._lock:
            return self._supply.get(normalize_address(token), 0)

    def balances(self, token: str) -> dict[str, int]:
        """All non-zero holders of a token."""
        token_norm = normalize_address(token)
        with self._lock:
            return {acct: amt for (tok, acct), amt in self._balances.items() if tok == token_norm}

    # --- Mutations ---

    def mint(self, token: str, account: str, amount: int) -> None:
        """Create `amount` new tokens for `account`."""
        check_uint256("amount", amount)
        if amount <= 0:
            raise ZeroAmount(f"Mint amount must be positive: {amount}")
        token_norm = normalize_address(token)
        key = (token_norm, normalize_address(account))
        with self._lock:
            new_supply = (S(self._supply.get(token_norm, 0)) + amount).to_uint256()
            self._record("supply", (token_norm,), self._supply.get(token_norm))
            self._supply[token_norm] = new_supply
            self._set_balance(key, self._balances.get(key, 0) + amount)

    def approve(self, token: str, owner: str, spender: str, amount: int) -> None:
        """Set (not increase) spender's allowance over owner's tokens."""
        check_uint256("amount", amount)
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        with self._lock:
            self._set_allowance(key, amount)

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        check_uint256("amount", amount)
        token_norm = normalize_address(token)
        sender_norm = normalize_address(sender)
        recipient_norm = normalize_address(recipient)
        with self._lock:
            self._move(token_norm, sender_norm, recipient_norm, amount)

    def transfer_from(
        self,
        token: str,
        spender: str,
        owner: str,
        recipient: str,
        amount: int,
    ) -> None:
        check_uint256("amount", amount)
        token_norm = normalize_address(token)
        owner_norm = normalize_address(owner)
        allowance_key = (token_norm, owner_norm, normalize_address(spender))
        with self._lock:
            current = self._allowances.get(allowance_key, 0)
            if current < amount:
                raise InsufficientAllowance(
                    f"ERC20InsufficientAllowance: spender {allowance_key[2]} "
                    f"allowance {current} < needed {amount}"
                )
            # Balance is checked before the allowance is spent so a refused
            # transfer leaves the allowance intact.
            self._check_balance(token_norm, owner_norm, amount)
            self._set_allowance(allowance_key, current - amount)
            self._move(token_norm, owner_norm, normalize_address(recipient), amount)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Apply every mutation in the block, or none of them.

        Holds the ledger lock for the duration of the block. Nested blocks
        merge into the outermost one on success.
        """
        with self._lock:
            journal: list[_JournalEntry] = []
            self._journals.append(journal)
            try:
                yield
            except BaseException:
                self._journals.pop()
                self._rollback(journal)
                raise
            self._journals.pop()
            if self._journals:
                self._journals[-1].extend(journal)

    # --- Internals ---

    def _check_balance(self, token: str, account: str, amount: int) -> None:
        balance = self._balances.get((token, account), 0)
        if balance < amount:
            raise InsufficientBalance(
                f"ERC20InsufficientBalance: {account} balance {balance} < needed {amount}"
            )

    def _move(self, token: str, sender: str, recipient: str, amount: int) -> None:
        self._check_balance(token, sender, amount)
        if sender == recipient or amount == 0:
            return
        sender_key = (token, sender)
        recipient_key = (token, recipient)
        self._set_balance(sender_key, (S(self._balances.get(sender_key, 0)) - amount).value)
        self._set_balance(recipient_key, self._balances.get(recipient_key, 0) + amount)

    def _set_balance(self, key: _BalanceKey, amount: int) -> None:
        self._record("balance", key, self._balances.get(key))
        if amount == 0:
            self._balances.pop(key, None)
        else:
            self._balances[key] = amount

    def _set_allowance(self, key: _AllowanceKey, amount: int) -> None:
        self._record("allowance", key, self._allowances.get(key))
        if amount == 0:
            self._allowances.pop(key, None)
        else:
            self._allowances[key] = amount

    def _record(self, table: str, key: tuple[str, ...], previous: int | None) -> None:
        if self._journals:
            self._journals[-1].append((table, key, previous))

    def _rollback(self, journal: list[_JournalEntry]) -> None:
        tables: dict[str, dict] = {
            "balance": self._balances,
            "allowance": self._allowances,
            "supply": self._supply,
        }
        for table, key, previous in reversed(journal):
            target = tables[table]
            lookup = key[0] if table == "supply" else key
            if previous is None:
                target.pop(lookup, None)
            else:
                target[lookup] = previous
        if journal:
            logger.debug("ledger_rollback", entries=len(journal))

    def __repr__(self) -> str:
        return f"InMemoryLedger({len(self._balances)} balances, {len(self._allowances)} allowances)"
