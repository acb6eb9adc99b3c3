"""Shared field types for pool API models.

On-chain integers arrive as decimal strings (they exceed JSON number
precision), so the models keep them as validated strings and expose int
accessors where the math needs them.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from clmm.math.fixed_point import convert_i32_to_signed

UINT64_MAX = 2**64 - 1
UINT128_MAX = 2**128 - 1


def _validate_uint(value: Any, max_value: int, name: str) -> str:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be string or int, got bool")
    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"{name} must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"{name} must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"{name} cannot be negative: {value}")
    if int_value > max_value:
        raise ValueError(f"{name} overflow: {value}")
    return str(int_value)


def validate_uint64(value: Any) -> str:
    """Validate a u64 given as int or decimal string, returning the string."""
    return _validate_uint(value, UINT64_MAX, "Uint64")


def validate_uint128(value: Any) -> str:
    """Validate a u128 given as int or decimal string, returning the string."""
    return _validate_uint(value, UINT128_MAX, "Uint128")


def validate_tick_index(value: Any) -> int:
    """Accept a tick index as a signed int or its unsigned 32-bit encoding."""
    if isinstance(value, str):
        value = int(value)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Tick index must be an integer, got {type(value).__name__}")
    if value < 0:
        return value
    return convert_i32_to_signed(value)


# 64-bit unsigned integer as decimal string (validated)
Uint64 = Annotated[
    str,
    BeforeValidator(validate_uint64),
    Field(description="64-bit unsigned integer as decimal string"),
]

# 128-bit unsigned integer as decimal string (validated)
Uint128 = Annotated[
    str,
    BeforeValidator(validate_uint128),
    Field(description="128-bit unsigned integer as decimal string"),
]

# Signed tick index; the API may send the raw u32 word
TickIndex = Annotated[int, BeforeValidator(validate_tick_index)]

# Move struct tag, e.g. 0x2::sui::SUI
CoinType = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]+::\w+::\w+")]
