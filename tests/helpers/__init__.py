"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Coin types and common values
- factories: Pool, edge and token factory functions
"""

from tests.helpers.constants import (
    SQRT_PRICE_ONE,
    SUI,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    TOKEN_DECIMALS,
    USDC,
)
from tests.helpers.factories import make_edge, make_pool_info, make_token_info

__all__ = [
    # Constants
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    "SUI",
    "USDC",
    "TOKEN_DECIMALS",
    "SQRT_PRICE_ONE",
    # Factories
    "make_edge",
    "make_pool_info",
    "make_token_info",
]
