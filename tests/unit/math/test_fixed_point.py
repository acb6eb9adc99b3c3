"""Tests for Q64.64 fixed-point helpers."""

from decimal import Decimal

import pytest

from clmm.errors import DivideByZero, MathErrorCode, Overflow, UnsignedIntegerOverflow
from clmm.math.fixed_point import (
    U64_MAX,
    U128_MAX,
    abs_u128,
    as_int_n,
    as_uint_n,
    check_div_round_up_if,
    check_mul,
    check_mul_shift_left,
    check_mul_shift_right,
    check_mul_shift_right64_round_up_if,
    check_unsigned_sub,
    convert_i32_to_signed,
    convert_i128_to_signed,
    convert_signed_to_i32,
    convert_signed_to_i128,
    d,
    div_round_up,
    from_x64,
    is_neg,
    is_overflow,
    mod,
    mul_div_ceil,
    mul_div_floor,
    mul_div_round,
    neg,
    neg_from,
    shift_right_round_up,
    sign,
    sub_underflow_u128,
    to_decimals_amount,
    to_x64,
)


class TestMulDiv:
    """Tests for scaled multiply-divide with rounding."""

    def test_rounding_modes(self) -> None:
        # 10 * 3 / 4 = 7.5
        assert mul_div_floor(10, 3, 4, 64) == 7
        assert mul_div_ceil(10, 3, 4, 64) == 8
        assert mul_div_round(10, 3, 4, 64) == 8

    def test_round_below_half(self) -> None:
        # 9 / 4 = 2.25
        assert mul_div_round(9, 1, 4, 64) == 2

    def test_exact_division_agrees(self) -> None:
        assert mul_div_floor(12, 3, 4, 64) == 9
        assert mul_div_ceil(12, 3, 4, 64) == 9
        assert mul_div_round(12, 3, 4, 64) == 9

    def test_floor_le_ceil_with_equality_iff_exact(self) -> None:
        for a in range(0, 40, 3):
            for b in range(1, 30, 7):
                for denom in range(1, 13):
                    floor = mul_div_floor(a, b, denom, 128)
                    ceil = mul_div_ceil(a, b, denom, 128)
                    assert floor <= ceil
                    assert (floor == ceil) == ((a * b) % denom == 0)

    @pytest.mark.parametrize("fn", [mul_div_floor, mul_div_ceil, mul_div_round])
    def test_divide_by_zero(self, fn) -> None:
        with pytest.raises(DivideByZero) as exc_info:
            fn(1, 1, 0, 64)
        assert exc_info.value.code == MathErrorCode.DIVIDE_BY_ZERO

    def test_overflow_at_limit(self) -> None:
        assert mul_div_floor(U64_MAX, 1, 1, 64) == U64_MAX
        with pytest.raises(Overflow) as exc_info:
            mul_div_floor(2**64, 1, 1, 64)
        assert exc_info.value.code == MathErrorCode.MUL_DIV_OVERFLOW

    def test_ceil_can_overflow_where_floor_does_not(self) -> None:
        # (2^64 - 1) + 1/2 rounds up to 2^64
        a = 2 * U64_MAX + 1
        assert mul_div_floor(a, 1, 2, 64) == U64_MAX
        with pytest.raises(Overflow):
            mul_div_ceil(a, 1, 2, 64)


class TestCheckedOps:
    """Tests for checked multiply, shift and subtract."""

    def test_is_overflow(self) -> None:
        assert not is_overflow(U64_MAX, 64)
        assert is_overflow(2**64, 64)

    def test_check_mul(self) -> None:
        assert check_mul(2**32, 2**32 - 1, 64) == 2**64 - 2**32
        with pytest.raises(Overflow) as exc_info:
            check_mul(2**32, 2**32, 64)
        assert exc_info.value.code == MathErrorCode.MUL_OVERFLOW

    def test_check_mul_shift_right(self) -> None:
        assert check_mul_shift_right(2**64, 3, 64, 64) == 3
        with pytest.raises(Overflow) as exc_info:
            check_mul_shift_right(2**70, 2**70, 64, 64)
        assert exc_info.value.code == MathErrorCode.MUL_SHIFT_RIGHT_OVERFLOW

    def test_check_mul_shift_right64_round_up_if(self) -> None:
        # 3 * 2^63 / 2^64 = 1.5
        assert check_mul_shift_right64_round_up_if(3, 2**63, 128, False) == 1
        assert check_mul_shift_right64_round_up_if(3, 2**63, 128, True) == 2
        # Exact results are not bumped
        assert check_mul_shift_right64_round_up_if(2, 2**64, 128, True) == 2

    def test_check_mul_shift_left(self) -> None:
        assert check_mul_shift_left(3, 5, 4, 64) == 240
        with pytest.raises(Overflow) as exc_info:
            check_mul_shift_left(1, 1, 64, 64)
        assert exc_info.value.code == MathErrorCode.MUL_SHIFT_LEFT_OVERFLOW

    def test_div_round_up(self) -> None:
        assert div_round_up(7, 2) == 4
        assert div_round_up(8, 2) == 4
        assert check_div_round_up_if(7, 2, False) == 3
        assert check_div_round_up_if(7, 2, True) == 4
        with pytest.raises(DivideByZero):
            check_div_round_up_if(7, 0, True)

    def test_unsigned_sub(self) -> None:
        assert check_unsigned_sub(5, 5) == 0
        with pytest.raises(UnsignedIntegerOverflow) as exc_info:
            check_unsigned_sub(1, 2)
        assert exc_info.value.code == MathErrorCode.UNSIGNED_INTEGER_OVERFLOW

    def test_sub_underflow_u128_wraps(self) -> None:
        assert sub_underflow_u128(5, 3) == 2
        assert sub_underflow_u128(1, 2) == U128_MAX - 1


class TestShiftRightRoundUp:
    """Divide by 2^64, rounding up iff any low bit is set."""

    def test_exact(self) -> None:
        assert shift_right_round_up(0) == 0
        assert shift_right_round_up(2**64) == 1
        assert shift_right_round_up(5 * 2**64) == 5

    def test_inexact(self) -> None:
        assert shift_right_round_up(1) == 1
        assert shift_right_round_up(2**64 + 1) == 2

    def test_all_low_bits_set(self) -> None:
        # U64_MAX is a multiple of itself but not of 2^64
        assert shift_right_round_up(U64_MAX) == 1
        assert shift_right_round_up(3 * 2**64 + U64_MAX) == 4


class TestSigned128:
    """Two's-complement helpers over unsigned 128-bit words."""

    def test_sign(self) -> None:
        assert sign(0) == 0
        assert sign(2**127 - 1) == 0
        assert sign(2**127) == 1
        assert is_neg(U128_MAX)

    def test_neg_from_minus_one(self) -> None:
        assert neg_from(1) == U128_MAX
        assert neg_from(0) == 0

    def test_abs(self) -> None:
        assert abs_u128(U128_MAX) == 1
        assert abs_u128(42) == 42

    def test_neg_round_trip(self) -> None:
        for value in (1, 5, 2**100, 2**127 - 1):
            assert neg(neg(value)) == value
            assert neg(value) == neg_from(value)
            assert is_neg(neg(value))


class TestConversions:
    """Tests for integer width conversions."""

    def test_i32(self) -> None:
        assert convert_i32_to_signed(0xFFFFFFFF) == -1
        assert convert_i32_to_signed(443636) == 443636
        assert convert_signed_to_i32(-1) == 0xFFFFFFFF
        assert convert_signed_to_i32(convert_i32_to_signed(2**32 - 443636)) == 2**32 - 443636

    def test_i32_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="32-bit"):
            convert_signed_to_i32(2**31)
        with pytest.raises(ValueError):
            convert_signed_to_i32(-(2**31) - 1)

    def test_i128(self) -> None:
        assert convert_i128_to_signed(str(U128_MAX)) == -1
        assert convert_signed_to_i128(-1) == U128_MAX
        assert convert_signed_to_i128("12") == 12
        with pytest.raises(ValueError, match="128-bit"):
            convert_signed_to_i128(2**127)

    def test_as_int_n(self) -> None:
        assert as_int_n(2**32 - 5, 32) == -5
        assert as_int_n(7, 32) == 7
        assert as_uint_n(-1, 32) == 0xFFFFFFFF


class TestDecimalHelpers:
    """Tests for Decimal <-> Q64.64 helpers."""

    def test_d_coerces_floats_via_str(self) -> None:
        assert d(0.01) == Decimal("0.01")
        assert d(None) == Decimal(0)
        assert d("1.5") == Decimal("1.5")

    def test_x64_conversions(self) -> None:
        assert to_x64(Decimal("1.5")) == 3 * 2**63
        assert to_x64(Decimal(1)) == 2**64
        assert from_x64(2**63) == Decimal("0.5")

    def test_to_decimals_amount(self) -> None:
        assert to_decimals_amount("1.5", 6) == 1_500_000
        assert to_decimals_amount(Decimal("0.0000001"), 6) == 0

    def test_floored_mod(self) -> None:
        assert mod(7, 5) == 2
        assert mod(-7, 5) == 3
        assert mod(-10, 5) == 0
