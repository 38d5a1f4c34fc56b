"""
Money primitive

Immutable currency value that stores signed integer minor units.
All split arithmetic happens on these integers; Decimal is used only at the
boundary when amounts come in from, or go back out to, callers.
"""

from dataclasses import dataclass
from decimal import Decimal

from splitter.core.exceptions import ArithmeticOverflowError, InvalidInputError
from splitter.utils.decimal_utils import DecimalLike, from_minor_units, to_minor_units

# Signed 64-bit range, the widest amount the persistence layer can store
MAX_MINOR_UNITS = 2**63 - 1

DEFAULT_EXPONENT = 2

# ISO 4217 currencies whose minor unit is not the cent
CURRENCY_EXPONENTS = {
    "BIF": 0,
    "CLP": 0,
    "DJF": 0,
    "GNF": 0,
    "ISK": 0,
    "JPY": 0,
    "KMF": 0,
    "KRW": 0,
    "PYG": 0,
    "RWF": 0,
    "UGX": 0,
    "VND": 0,
    "VUV": 0,
    "XAF": 0,
    "XOF": 0,
    "XPF": 0,
    "BHD": 3,
    "IQD": 3,
    "JOD": 3,
    "KWD": 3,
    "LYD": 3,
    "OMR": 3,
    "TND": 3,
}


def normalize_currency(currency: str) -> str:
    """Upper-case and validate an ISO 4217 currency code."""
    code = (currency or "").strip().upper()
    if len(code) != 3 or not (code.isascii() and code.isalpha()):
        raise InvalidInputError(f"Invalid currency code: {currency!r}")
    return code


def currency_exponent(currency: str) -> int:
    """Number of minor-unit digits for a currency (2 unless listed)."""
    return CURRENCY_EXPONENTS.get(normalize_currency(currency), DEFAULT_EXPONENT)


def check_range(minor_units: int) -> int:
    """
    Ensure a minor-unit count fits the representable range.

    Raises:
        ArithmeticOverflowError: If the value is outside the signed 64-bit range
    """
    if abs(minor_units) > MAX_MINOR_UNITS:
        raise ArithmeticOverflowError(
            f"Amount of {minor_units} minor units exceeds the representable range",
            details={"max_minor_units": MAX_MINOR_UNITS},
        )
    return minor_units


@dataclass(frozen=True)
class Money:
    """
    Immutable signed amount in minor units of one currency.

    Examples:
        >>> Money.from_decimal("10.00", "GBP").minor_units
        1000
        >>> Money.from_decimal("-3.335", "EUR").to_decimal()
        Decimal('-3.34')
        >>> Money.from_decimal("1500", "JPY").minor_units
        1500
    """

    minor_units: int
    currency: str

    def __post_init__(self):
        object.__setattr__(self, "currency", normalize_currency(self.currency))
        check_range(self.minor_units)

    @classmethod
    def from_decimal(cls, amount: DecimalLike, currency: str) -> "Money":
        """
        Create Money from a major-unit amount.

        The amount is rounded HALF_UP to the currency's exponent.

        Raises:
            InvalidInputError: If the amount or currency is malformed
            ArithmeticOverflowError: If the amount is out of range
        """
        exponent = currency_exponent(currency)
        return cls(minor_units=to_minor_units(amount, exponent), currency=currency)

    @classmethod
    def zero(cls, currency: str) -> "Money":
        return cls(minor_units=0, currency=currency)

    @property
    def exponent(self) -> int:
        return currency_exponent(self.currency)

    def to_decimal(self) -> Decimal:
        """Amount in major units with the currency's number of decimals."""
        return from_minor_units(self.minor_units, self.exponent)

    def sign(self) -> int:
        """-1, 0 or 1."""
        return (self.minor_units > 0) - (self.minor_units < 0)

    def abs(self) -> "Money":
        return Money(minor_units=abs(self.minor_units), currency=self.currency)

    def with_minor_units(self, minor_units: int) -> "Money":
        """New Money in the same currency."""
        return Money(minor_units=minor_units, currency=self.currency)

    def _check_currency(self, other: "Money") -> None:
        if other.currency != self.currency:
            raise InvalidInputError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return self.with_minor_units(self.minor_units + other.minor_units)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return self.with_minor_units(self.minor_units - other.minor_units)

    def __neg__(self) -> "Money":
        return self.with_minor_units(-self.minor_units)

    def __str__(self) -> str:
        return f"{self.to_decimal()} {self.currency}"
