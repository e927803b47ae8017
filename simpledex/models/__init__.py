"""Data models: address/amount types, events and HTTP schemas."""

from simpledex.models.events import AnyEvent, DexEvent, LiquidityAdded, LiquidityRemoved, Swap
from simpledex.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    "DexEvent",
    "AnyEvent",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swap",
]
