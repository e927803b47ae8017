"""Pool engines: liquidity provisioning and swaps."""

from .base import BaseEngine
from .liquidity import LiquidityEngine
from .swap import SwapEngine

__all__ = ["BaseEngine", "LiquidityEngine", "SwapEngine"]
