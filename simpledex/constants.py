"""Protocol constants for the SimpleDEX pool engine.

Centralizes fee parameters, integer bounds and well-known accounts.
"""

# Maximum uint256 value (token amounts are 256-bit words on the ledger)
UINT256_MAX = 2**256 - 1

# Fees are expressed in basis points of BPS_DENOMINATOR.
BPS_DENOMINATOR = 10_000

# 30 bps (0.3%): amount_in * 9970 // 10000 is priced, i.e. 997/1000.
# Swapping 10 tokens against 1000/1000 reserves yields ~9.87 out.
DEFAULT_FEE_BPS = 30

# Account that holds pooled reserves on the ledger and acts as the
# allowance spender for deposits and swaps.
DEFAULT_DEX_ADDRESS = "0x000000000000000000000000000000000000de00"

# Token amounts use 18 decimals unless a token says otherwise.
ONE_TOKEN = 10**18

# Event names, as emitted to observers
EVENT_LIQUIDITY_ADDED = "LiquidityAdded"
EVENT_LIQUIDITY_REMOVED = "LiquidityRemoved"
EVENT_SWAP = "Swap"
