"""Coin type (Move struct tag) normalization."""

from __future__ import annotations

import re

from clmm.constants import SUI_COIN_TYPE, SUI_COIN_TYPE_LONG

# Address part of a struct tag, including those nested in type parameters
_ADDRESS_RE = re.compile(r"0x([0-9a-fA-F]{1,64})(?=::)")


def normalize_struct_tag(coin_type: str) -> str:
    """Normalize a struct tag to lowercase 32-byte addresses.

    Every address, including those in type parameters, is left-padded to 64
    hex digits, so ``0x2::sui::SUI`` and its long form compare equal.

    Args:
        coin_type: Struct tag such as ``0x2::sui::SUI``

    Returns:
        The normalized struct tag
    """
    return _ADDRESS_RE.sub(lambda m: "0x" + m.group(1).lower().rjust(64, "0"), coin_type.strip())


def is_sui_coin(coin_type: str) -> bool:
    return normalize_struct_tag(coin_type) == normalize_struct_tag(SUI_COIN_TYPE)


def format_coin_type(coin_type: str) -> str:
    """Return the long form for the native SUI coin, otherwise the input."""
    if is_sui_coin(coin_type):
        return SUI_COIN_TYPE_LONG
    return coin_type


__all__ = ["normalize_struct_tag", "is_sui_coin", "format_coin_type"]
