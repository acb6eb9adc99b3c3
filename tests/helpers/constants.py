"""Shared token constants for tests.

All coin types use the normalized long address form, matching what
normalize_struct_tag() produces.

Usage:
    from tests.helpers import TOKEN_A, USDC
"""

# =============================================================================
# Synthetic tokens for graph tests
# =============================================================================

TOKEN_A = "0x" + "a" * 64 + "::coin_a::COIN_A"
TOKEN_B = "0x" + "b" * 64 + "::coin_b::COIN_B"
TOKEN_C = "0x" + "c" * 64 + "::coin_c::COIN_C"
TOKEN_D = "0x" + "d" * 64 + "::coin_d::COIN_D"

# =============================================================================
# Sui mainnet coins
# =============================================================================

SUI = "0x0000000000000000000000000000000000000000000000000000000000000002::sui::SUI"
USDC = "0xdba34672e30cb065b1f93e3ab55318768fd6fef66c15942c9f7cb846e2f900e7::usdc::USDC"

# =============================================================================
# Token decimals lookup (for tests that need it)
# =============================================================================

TOKEN_DECIMALS = {
    TOKEN_A: 9,
    TOKEN_B: 6,
    TOKEN_C: 9,
    TOKEN_D: 8,
    SUI: 9,
    USDC: 6,
}

# Q64.64 one, the sqrt price of tick 0
SQRT_PRICE_ONE = 2**64


__all__ = [
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    "SUI",
    "USDC",
    "TOKEN_DECIMALS",
    "SQRT_PRICE_ONE",
]
