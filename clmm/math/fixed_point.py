"""Q64.64 fixed-point helpers matching the on-chain integer math.

All operands are non-negative Python ints standing in for unsigned
machine words. Every checked operation takes a ``limit`` bit width and
raises Overflow when the result is ``>= 2**limit``, so a result that would
wrap on-chain fails here instead of silently producing a different amount.

Signed 128-bit values follow the on-chain encoding: an unsigned 128-bit word
whose bit 127 is the sign flag. The helpers below operate on that encoding,
not on Python's native negative ints.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, localcontext

from clmm.errors import DivideByZero, MathErrorCode, Overflow, UnsignedIntegerOverflow

__all__ = [
    # Constants
    "ZERO",
    "ONE",
    "TWO",
    "U64_MAX",
    "U128",
    "U128_MAX",
    "DECIMAL_PRECISION",
    # Checked arithmetic
    "is_overflow",
    "mul_div_floor",
    "mul_div_ceil",
    "mul_div_round",
    "check_mul",
    "check_mul_shift_right",
    "check_mul_shift_right64_round_up_if",
    "check_mul_shift_left",
    "check_div_round_up_if",
    "check_unsigned_sub",
    "div_round_up",
    "shift_right_round_up",
    "sub_underflow_u128",
    # Signed 128-bit encoding
    "sign",
    "is_neg",
    "u128_neg",
    "neg",
    "neg_from",
    "abs_u128",
    # Integer width conversions
    "convert_i32_to_signed",
    "convert_signed_to_i32",
    "convert_i128_to_signed",
    "convert_signed_to_i128",
    "as_uint_n",
    "as_int_n",
    # Decimal helpers
    "d",
    "to_x64",
    "to_x64_decimal",
    "from_x64",
    "from_x64_int",
    "decimals_multiplier",
    "to_decimals_amount",
    "mod",
]

# =============================================================================
# Constants
# =============================================================================

ZERO = 0
ONE = 1
TWO = 2
U64_MAX = 2**64 - 1
U128 = 2**128
U128_MAX = 2**128 - 1

_SIGN_BIT_128 = 1 << 127
_I32_MAX = 0x7FFFFFFF
_I32_MIN = -0x80000000
_I128_MAX = 2**127 - 1
_I128_MIN = -(2**127)

# Enough digits to carry a Q64.64 value squared without rounding
DECIMAL_PRECISION = 96

_X64 = Decimal(2**64)


# =============================================================================
# Checked arithmetic
# =============================================================================


def is_overflow(n: int, limit: int) -> bool:
    """True if n does not fit in ``limit`` unsigned bits."""
    return n >= 1 << limit


def _check_denominator(denom: int) -> None:
    if denom == 0:
        raise DivideByZero("Divide by zero", MathErrorCode.DIVIDE_BY_ZERO)


def mul_div_floor(a: int, b: int, denom: int, limit: int) -> int:
    """Compute ``a * b / denom`` rounded down.

    Raises:
        DivideByZero: If denom is zero
        Overflow: If the result is >= 2**limit
    """
    _check_denominator(denom)
    n = (a * b) // denom
    if is_overflow(n, limit):
        raise Overflow("Multiplication div overflow", MathErrorCode.MUL_DIV_OVERFLOW)
    return n


def mul_div_ceil(a: int, b: int, denom: int, limit: int) -> int:
    """Compute ``a * b / denom`` rounded up.

    Raises:
        DivideByZero: If denom is zero
        Overflow: If the result is >= 2**limit
    """
    _check_denominator(denom)
    n = (a * b + denom - 1) // denom
    if is_overflow(n, limit):
        raise Overflow("Multiplication div overflow", MathErrorCode.MUL_DIV_OVERFLOW)
    return n


def mul_div_round(a: int, b: int, denom: int, limit: int) -> int:
    """Compute ``a * b / denom`` rounded half up.

    Raises:
        DivideByZero: If denom is zero
        Overflow: If the result is >= 2**limit
    """
    _check_denominator(denom)
    n = (a * b + (denom >> 1)) // denom
    if is_overflow(n, limit):
        raise Overflow("Multiplication div overflow", MathErrorCode.MUL_DIV_OVERFLOW)
    return n


def check_mul(a: int, b: int, limit: int) -> int:
    """Multiply, failing if the product does not fit in ``limit`` bits."""
    n = a * b
    if is_overflow(n, limit):
        raise Overflow("Multiplication overflow", MathErrorCode.MUL_OVERFLOW)
    return n


def check_mul_shift_right(a: int, b: int, shift: int, limit: int) -> int:
    """Compute ``(a * b) >> shift`` with an overflow check on the result."""
    n = (a * b) >> shift
    if is_overflow(n, limit):
        raise Overflow("Multiplication shift right overflow", MathErrorCode.MUL_SHIFT_RIGHT_OVERFLOW)
    return n


def check_mul_shift_right64_round_up_if(a: int, b: int, limit: int, round_up: bool) -> int:
    """Compute ``(a * b) >> 64``, rounding up when requested and inexact."""
    p = a * b
    result = p >> 64
    if round_up and p & U64_MAX:
        result += 1
    if is_overflow(result, limit):
        raise Overflow("Multiplication shift right overflow", MathErrorCode.MUL_SHIFT_RIGHT_OVERFLOW)
    return result


def check_mul_shift_left(a: int, b: int, shift: int, limit: int) -> int:
    """Compute ``(a * b) << shift`` with an overflow check on the result."""
    n = (a * b) << shift
    if is_overflow(n, limit):
        raise Overflow("Multiplication shift left overflow", MathErrorCode.MUL_SHIFT_LEFT_OVERFLOW)
    return n


def div_round_up(a: int, b: int) -> int:
    """Integer division rounding up when there is a remainder."""
    _check_denominator(b)
    q, r = divmod(a, b)
    return q + 1 if r else q


def check_div_round_up_if(a: int, b: int, round_up: bool) -> int:
    """Divide, rounding up only when ``round_up`` is set."""
    _check_denominator(b)
    if round_up:
        return div_round_up(a, b)
    return a // b


def check_unsigned_sub(a: int, b: int) -> int:
    """Subtract, failing if the result would be negative."""
    n = a - b
    if n < 0:
        raise UnsignedIntegerOverflow("Unsigned integer sub overflow")
    return n


def sub_underflow_u128(a: int, b: int) -> int:
    """Wrapping u128 subtraction as performed on-chain."""
    if a < b:
        return a - b + U128_MAX
    return a - b


def shift_right_round_up(n: int) -> int:
    """Divide by 2**64, rounding up iff any of the low 64 bits is set."""
    result = n >> 64
    if n & U64_MAX:
        result += 1
    return result


# =============================================================================
# Signed 128-bit encoding (bit 127 is the sign flag)
# =============================================================================


def sign(v: int) -> int:
    """Return 1 if bit 127 is set, else 0."""
    return 1 if v & _SIGN_BIT_128 else 0


def is_neg(v: int) -> bool:
    return sign(v) == 1


def u128_neg(v: int) -> int:
    """Bitwise complement within 128 bits."""
    return v ^ U128_MAX


def abs_u128(v: int) -> int:
    """Magnitude of a two's-complement 128-bit word."""
    if sign(v) == 0:
        return v
    return u128_neg(v - 1)


def neg_from(v: int) -> int:
    """Two's-complement negation of a non-negative magnitude."""
    if v == 0:
        return v
    return (u128_neg(v) + 1) | _SIGN_BIT_128


def neg(v: int) -> int:
    """Negate a two's-complement 128-bit word."""
    if is_neg(v):
        return abs_u128(v)
    return neg_from(v)


# =============================================================================
# Integer width conversions
# =============================================================================


def convert_i32_to_signed(num: int) -> int:
    """Interpret an unsigned 32-bit word as a signed integer."""
    if num > _I32_MAX:
        return num - 0x100000000
    return num


def convert_signed_to_i32(num: int) -> int:
    """Encode a signed integer as an unsigned 32-bit word.

    Raises:
        ValueError: If num is outside the signed 32-bit range
    """
    if num < _I32_MIN or num > _I32_MAX:
        raise ValueError(f"The number is out of range for a 32-bit signed integer: {num}")
    if num < 0:
        return 0x100000000 + num
    return num


def convert_i128_to_signed(num: int | str) -> int:
    """Interpret an unsigned 128-bit word as a signed integer."""
    n = int(num)
    if n > _I128_MAX:
        return n - U128
    return n


def convert_signed_to_i128(num: int | str) -> int:
    """Encode a signed integer as an unsigned 128-bit word.

    Raises:
        ValueError: If num is outside the signed 128-bit range
    """
    n = int(num)
    if n < _I128_MIN or n > _I128_MAX:
        raise ValueError(f"The number is out of range for a 128-bit signed integer: {n}")
    return U128 + n if n < 0 else n


def as_uint_n(value: int, bits: int = 32) -> int:
    """Wrap value into ``bits`` unsigned bits."""
    return value & ((1 << bits) - 1)


def as_int_n(value: int, bits: int = 32) -> int:
    """Wrap value into ``bits`` signed bits."""
    wrapped = as_uint_n(value, bits)
    if wrapped >= 1 << (bits - 1):
        return wrapped - (1 << bits)
    return wrapped


# =============================================================================
# Decimal helpers
# =============================================================================


def d(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce a value to Decimal, treating None as zero.

    Floats go through ``str`` so 0.01 becomes Decimal("0.01") rather than
    its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal(0)
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def to_x64_decimal(num: Decimal) -> Decimal:
    """Scale a Decimal by 2**64 without rounding."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return num * _X64


def to_x64(num: Decimal) -> int:
    """Scale a Decimal by 2**64 and floor to an int."""
    return int(to_x64_decimal(num).to_integral_value(rounding=ROUND_FLOOR))


def from_x64(num: int) -> Decimal:
    """Convert a Q64.64 int to its Decimal value."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(num) / _X64


def from_x64_int(num: int) -> int:
    """Drop the fractional 64 bits of a Q64.64 int."""
    return num >> 64


def decimals_multiplier(decimals: int) -> Decimal:
    return Decimal(10) ** abs(decimals)


def to_decimals_amount(amount: Decimal | int | float | str, decimals: int) -> int:
    """Convert a human amount to base units (truncating any remainder)."""
    return int(d(amount) * decimals_multiplier(decimals))


def mod(n: int, m: int) -> int:
    """Floored modulo: result has the sign of ``m``."""
    return ((n % m) + m) % m
