"""Shared type definitions for token identifiers and amounts.

Token and account identifiers are Ethereum-style addresses. Amounts cross
the HTTP boundary as uint256 decimal strings.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from simpledex.constants import UINT256_MAX

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)

# Plain aliases used by the pool engine (normalized lowercase addresses)
TokenId = str
AccountId = str


def validate_uint256(value: Any) -> str:
    """Coerce a JSON amount (int or decimal string) to canonical decimal text.

    "0042" becomes "42"; bools, floats and anything outside [0, 2^256-1]
    are rejected.

    Raises:
        ValueError: If the value is not a whole uint256 amount
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Amount must be an integer or decimal string, got {type(value).__name__}")

    if isinstance(value, str):
        text = value.strip()
        if not text.lstrip("-").isdigit():
            raise ValueError(f"Amount is not a decimal integer: '{value}'")
        amount = int(text)
    else:
        amount = value

    if not 0 <= amount <= UINT256_MAX:
        raise ValueError(f"Amount outside uint256 range: {value}")
    return str(amount)


Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]

Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="uint256 amount as a decimal string"),
]


def is_valid_address(address: str) -> bool:
    """True for 0x followed by exactly 40 hex digits."""
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address and make sure it carries the 0x prefix.

    Raises:
        ValueError: If validate=True and the result is not an address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = f"0x{addr}"
    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")
    return addr


def short(address: str) -> str:
    """Last 8 characters of an address, for log context."""
    return address[-8:]
