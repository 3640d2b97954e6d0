"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Accounts, amounts and timestamps
- factories: Token and pool factory functions
"""

from tests.helpers.constants import (
    ETHER,
    ONE_HOUR,
    OTHER,
    OWNER,
    POOL_RESERVE,
    RECIPIENT,
    START_TIME,
    TOKEN_SUPPLY,
    ZAPPER_ADDRESS,
)
from tests.helpers.factories import make_token, seed_pool

__all__ = [
    # Constants
    "OWNER",
    "OTHER",
    "RECIPIENT",
    "ZAPPER_ADDRESS",
    "ETHER",
    "TOKEN_SUPPLY",
    "POOL_RESERVE",
    "START_TIME",
    "ONE_HOUR",
    # Factories
    "make_token",
    "seed_pool",
]
