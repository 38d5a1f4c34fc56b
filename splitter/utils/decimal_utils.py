"""Decimal arithmetic helpers"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from splitter.core.exceptions import ArithmeticOverflowError, InvalidInputError

DecimalLike = Union[Decimal, str, int, float]


def to_decimal(value: DecimalLike) -> Decimal:
    """
    Coerce a numeric value to Decimal without going through binary floats.

    Floats are converted via their shortest string representation.

    Raises:
        InvalidInputError: If the value is not a finite number
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidInputError(f"Not a valid amount: {value!r}") from exc

    if not result.is_finite():
        raise InvalidInputError(f"Amount must be finite, got {value!r}")
    return result


def round_decimal(value: Decimal, decimal_places: int = 2) -> Decimal:
    """
    Round a decimal value to specified decimal places.

    Args:
        value: Decimal value to round
        decimal_places: Number of decimal places (default 2)

    Returns:
        Rounded decimal value
    """
    quantize_value = Decimal(10) ** -decimal_places
    return value.quantize(quantize_value, rounding=ROUND_HALF_UP)


def sum_decimals(values: list[Decimal]) -> Decimal:
    """
    Sum a list of decimal values.

    Args:
        values: List of decimal values

    Returns:
        Sum of all values
    """
    return sum(values, Decimal("0"))


def to_minor_units(value: DecimalLike, exponent: int = 2) -> int:
    """
    Convert a decimal amount to integer minor units.

    Rounds HALF_UP to the given exponent first, so 10.005 becomes 1001 cents.

    Args:
        value: Amount in major units
        exponent: Number of minor-unit digits (2 for cents)

    Returns:
        Signed integer count of minor units
    """
    try:
        rounded = round_decimal(to_decimal(value), exponent)
    except InvalidOperation as exc:
        raise ArithmeticOverflowError(f"Amount {value!r} is too large to represent") from exc
    return int(rounded.scaleb(exponent))


def from_minor_units(minor_units: int, exponent: int = 2) -> Decimal:
    """
    Convert integer minor units back to a Decimal in major units.

    Args:
        minor_units: Signed integer count of minor units
        exponent: Number of minor-unit digits (2 for cents)

    Returns:
        Decimal with exactly `exponent` decimal places
    """
    return round_decimal(Decimal(minor_units).scaleb(-exponent), exponent)
