"""
Conversions between fixed-point integer strings and Decimals.
"""
from decimal import Decimal, ROUND_DOWN, localcontext
from typing import Union

from config.constants import DEFAULT_DECIMALS
from utils.validators import ValidationError, validate_uint_string

# Enough digits for products of two Uint128 values
_PRECISION = 80


def scale_for(decimals: int = DEFAULT_DECIMALS) -> int:
    """Return 10 ** decimals."""
    if decimals < 0:
        raise ValidationError(f"decimals must be >= 0, got {decimals}")
    return 10 ** decimals


def to_decimal(value: str, decimals: int = DEFAULT_DECIMALS, name: str = "value") -> Decimal:
    """
    Interpret a fixed-point string at the given scale.

    Example:
        to_decimal("62500") == Decimal("0.0625")
    """
    raw = validate_uint_string(value, name=name)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(raw) / Decimal(scale_for(decimals))


def from_decimal(value: Union[Decimal, int, str], decimals: int = DEFAULT_DECIMALS) -> str:
    """
    Encode a non-negative quantity as a fixed-point string.

    Digits below the scale are truncated.
    """
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        amount = Decimal(value)
        if amount.is_nan() or amount.is_infinite():
            raise ValidationError(f"cannot encode non-finite value {value}")
        if amount < 0:
            raise ValidationError(f"fixed-point values must be non-negative, got {value}")
        scaled = (amount * scale_for(decimals)).quantize(Decimal(1), rounding=ROUND_DOWN)
    return str(int(scaled))


def ratio(numerator: str, denominator: str) -> Decimal:
    """Exact quotient of two fixed-point strings sharing a scale."""
    num = validate_uint_string(numerator, name="numerator")
    den = validate_uint_string(denominator, name="denominator")
    if den == 0:
        raise ValidationError("denominator must be positive")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(num) / Decimal(den)
