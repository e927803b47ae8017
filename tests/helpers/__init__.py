"""Test helpers module for shared test utilities.

- constants: Token and account addresses, amount helpers
- factories: Exchange fixtures mirroring the SimpleDEX deployment
"""

from tests.helpers.constants import (
    DEX,
    INITIAL_SUPPLY,
    LIQUIDITY_AMOUNT,
    OWNER,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    USER1,
    USER2,
    ether,
)
from tests.helpers.factories import DexFixture, deploy_fixture, provide_liquidity

__all__ = [
    # Constants
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    "OWNER",
    "USER1",
    "USER2",
    "DEX",
    "INITIAL_SUPPLY",
    "LIQUIDITY_AMOUNT",
    "ether",
    # Factories
    "DexFixture",
    "deploy_fixture",
    "provide_liquidity",
]
