"""Configuration for the exchange."""

import os
from dataclasses import dataclass

from simpledex.constants import BPS_DENOMINATOR, DEFAULT_DEX_ADDRESS, DEFAULT_FEE_BPS
from simpledex.models.types import normalize_address


@dataclass(frozen=True)
class DexConfig:
    """Centralized configuration for pool pricing and accounts.

    Attributes:
        fee_bps: Swap fee in basis points of the input amount (default: 30)
        dex_address: Ledger account holding pooled reserves; also the
            spender that providers and traders approve
        enforce_uint256: If True, reject amounts that do not fit uint256
    """

    fee_bps: int = DEFAULT_FEE_BPS
    dex_address: str = DEFAULT_DEX_ADDRESS
    enforce_uint256: bool = True

    def __post_init__(self) -> None:
        if not (0 <= self.fee_bps < BPS_DENOMINATOR):
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}): {self.fee_bps}")
        # frozen dataclass: bypass __setattr__ to store the normalized form
        object.__setattr__(self, "dex_address", normalize_address(self.dex_address, validate=True))

    @property
    def fee_multiplier(self) -> int:
        """Share of the input that is priced (10000 - fee_bps).

        For 30 bps (0.3%), this returns 9970.
        """
        return BPS_DENOMINATOR - self.fee_bps

    @classmethod
    def from_env(cls) -> "DexConfig":
        """Build a config from environment variables.

        - SIMPLEDEX_FEE_BPS: swap fee in basis points (default: 30)
        - SIMPLEDEX_ADDRESS: reserve-holding account (default: DEFAULT_DEX_ADDRESS)
        """
        return cls(
            fee_bps=int(os.environ.get("SIMPLEDEX_FEE_BPS", str(DEFAULT_FEE_BPS))),
            dex_address=os.environ.get("SIMPLEDEX_ADDRESS", DEFAULT_DEX_ADDRESS),
        )


# Default configuration instance
DEFAULT_DEX_CONFIG = DexConfig()
