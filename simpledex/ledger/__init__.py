"""Token ledger package.

Provides the Ledger protocol the pool engines move value through, and an
in-memory ERC20-style implementation.
"""

from .base import Ledger
from .memory import InMemoryLedger

__all__ = ["Ledger", "InMemoryLedger"]
