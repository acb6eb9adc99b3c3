"""Error classes for CLMM math, estimation and routing.

Math errors carry a MathErrorCode mirroring the on-chain error codes so
callers can tell which check failed without parsing messages.
"""

from __future__ import annotations

from enum import Enum


class MathErrorCode(str, Enum):
    """Error codes raised by fixed-point and tick math."""

    INTEGER_DOWNCAST_OVERFLOW = "IntegerDowncastOverflow"
    MUL_OVERFLOW = "MultiplicationOverflow"
    MUL_DIV_OVERFLOW = "MulDivOverflow"
    MUL_SHIFT_RIGHT_OVERFLOW = "MulShiftRightOverflow"
    MUL_SHIFT_LEFT_OVERFLOW = "MulShiftLeftOverflow"
    DIVIDE_BY_ZERO = "DivideByZero"
    UNSIGNED_INTEGER_OVERFLOW = "UnsignedIntegerOverflow"
    INVALID_COIN_AMOUNT = "InvalidCoinAmount"
    INVALID_LIQUIDITY_AMOUNT = "InvalidLiquidityAmount"
    INVALID_SQRT_PRICE = "InvalidSqrtPrice"
    INVALID_TWO_TICK_INDEX = "InvalidTwoTickIndex"


class ClmmError(Exception):
    """Base class for all errors raised by this package."""

    pass


class MathError(ClmmError, ArithmeticError):
    """Base class for fixed-point arithmetic errors.

    Attributes:
        code: The MathErrorCode identifying the failed check
    """

    default_code = MathErrorCode.MUL_OVERFLOW

    def __init__(self, message: str, code: MathErrorCode | None = None) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code


class Overflow(MathError):
    """Result does not fit in the declared bit width."""

    default_code = MathErrorCode.MUL_OVERFLOW


class DivideByZero(MathError):
    """Denominator of a scaled division was zero."""

    default_code = MathErrorCode.DIVIDE_BY_ZERO


class UnsignedIntegerOverflow(MathError):
    """Unsigned subtraction would produce a negative result."""

    default_code = MathErrorCode.UNSIGNED_INTEGER_OVERFLOW


class InvalidSqrtPrice(MathError):
    """Sqrt price is outside [MIN_SQRT_PRICE, MAX_SQRT_PRICE]."""

    default_code = MathErrorCode.INVALID_SQRT_PRICE


class InvalidRangeForSingleSidedEstimate(ClmmError, ValueError):
    """The chosen token cannot back a position on this side of the price.

    Raised when sizing liquidity by token B while the pool price is below
    the position range, or by token A while it is above.
    """

    pass


class TokenNotFound(ClmmError, LookupError):
    """Token metadata required for a calculation is missing."""

    pass


class RoutingError(ClmmError):
    """Base class for route selection errors."""

    pass


class NoRouteFound(RoutingError):
    """No path connects the tokens, or every candidate simulated to zero."""

    pass


class SimulationFailed(RoutingError):
    """A dry-run of a single candidate path failed.

    Recovered locally by the router, which scores the candidate as zero.
    """

    pass


class PoolDataError(ClmmError):
    """The pool data API returned an error or a malformed payload."""

    pass


__all__ = [
    "MathErrorCode",
    "ClmmError",
    "MathError",
    "Overflow",
    "DivideByZero",
    "UnsignedIntegerOverflow",
    "InvalidSqrtPrice",
    "InvalidRangeForSingleSidedEstimate",
    "TokenNotFound",
    "RoutingError",
    "NoRouteFound",
    "SimulationFailed",
    "PoolDataError",
]
