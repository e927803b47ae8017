"""SimpleDEX - constant-product pool accounting engine."""

from simpledex.dex import SimpleDEX, get_default_dex

__version__ = "0.1.0"
__all__ = ["SimpleDEX", "get_default_dex", "__version__"]
