"""Pool management package.

Provides PoolRegistry, the canonical PairKey and the Pool record.
"""

from .pair import PairKey
from .pool import Pool
from .registry import PoolRegistry

__all__ = [
    "PairKey",
    "Pool",
    "PoolRegistry",
]
