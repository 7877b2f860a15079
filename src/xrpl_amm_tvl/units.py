from __future__ import annotations

from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_DOWN,
    ROUND_HALF_UP,
    Context,
    Decimal,
)

from .constants import DROPS_PER_XRP

# Quotients are rounded to this many decimal places. Sums and products are exact.
# Every result drops trailing fractional zeros.
DECIMAL_PLACES = 20

_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)

# Wide enough that addition, multiplication and quantize never round.
EXACT = Context(
    prec=MAX_PREC,
    rounding=ROUND_HALF_UP,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
)


class ZeroReserveError(ArithmeticError):
    """Raised when a price would be derived from an empty reserve."""


def add(a: Decimal, b: Decimal) -> Decimal:
    return _trim(EXACT.add(a, b))


def multiply(a: Decimal, b: Decimal) -> Decimal:
    return _trim(EXACT.multiply(a, b))


def divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide two decimals, rounding half-up to ``DECIMAL_PLACES`` places.

    The quotient is first truncated with a couple of guard digits, then
    rounded once, so the result matches a single half-up rounding of the
    exact quotient.

    Raises:
        ZeroReserveError: If ``denominator`` is zero
    """
    if denominator.is_zero():
        raise ZeroReserveError(f"Cannot divide {numerator} by zero")
    if numerator.is_zero():
        return Decimal(0)

    integer_digits = max(numerator.adjusted() - denominator.adjusted() + 2, 1)
    guard = Context(
        prec=integer_digits + DECIMAL_PLACES + 2,
        rounding=ROUND_DOWN,
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
    )
    truncated = guard.divide(numerator, denominator)
    return _trim(truncated.quantize(_QUANTUM, rounding=ROUND_HALF_UP, context=EXACT))


def _trim(value: Decimal) -> Decimal:
    """Drop trailing fractional zeros without switching to exponent notation."""
    trimmed = value.normalize(EXACT)
    if trimmed.as_tuple().exponent > 0:
        return trimmed.quantize(Decimal(1), context=EXACT)
    return trimmed


def drops_to_xrp(drops: Decimal) -> Decimal:
    """Convert an amount of drops to whole XRP."""
    return divide(drops, DROPS_PER_XRP)
