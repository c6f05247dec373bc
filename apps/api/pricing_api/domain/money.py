"""
Currency and Money value types.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from functools import total_ordering
from typing import Union

from pricing_api.domain.errors import CurrencyMismatch, InvalidArgument, UnsupportedCurrency

SUPPORTED_CURRENCIES = ("EUR", "USD", "EGP")

Number = Union[Decimal, int, str]


def round_half_away(value: Decimal, places: int) -> Decimal:
    """
    Round to a fixed number of decimal places, ties away from zero.

    Decimal's ROUND_HALF_UP rounds 2.5 to 3 and -2.5 to -3, which is the
    "away from zero" rule (not banker's rounding, which Python's round() uses).
    """
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Currency:
    """A supported ISO-4217 style currency code."""
    code: str

    @classmethod
    def from_code(cls, code: str) -> "Currency":
        """
        Parse a currency code, tolerating surrounding whitespace and lowercase.

        Raises:
            InvalidArgument: code is empty or not three letters
            UnsupportedCurrency: code is well-formed but not supported
        """
        if code is None or not str(code).strip():
            raise InvalidArgument("Currency code cannot be empty")

        normalized = str(code).strip().upper()
        if len(normalized) != 3 or not normalized.isalpha():
            raise InvalidArgument(f"Currency code must be exactly 3 letters (got {code!r})")
        if normalized not in SUPPORTED_CURRENCIES:
            raise UnsupportedCurrency(
                f"Unsupported currency code: {code}. Supported currencies: {', '.join(SUPPORTED_CURRENCIES)}"
            )
        return cls(normalized)

    @staticmethod
    def is_supported(code: str) -> bool:
        if not code:
            return False
        return code.strip().upper() in SUPPORTED_CURRENCIES

    def __str__(self) -> str:
        return self.code


EUR = Currency("EUR")
USD = Currency("USD")
EGP = Currency("EGP")


@total_ordering
@dataclass(frozen=True)
class Money:
    """A non-negative amount in a single currency."""
    amount: Decimal
    currency: Currency

    @classmethod
    def create(cls, amount: Number, currency: Union[Currency, str]) -> "Money":
        if isinstance(currency, str):
            currency = Currency.from_code(currency)
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except InvalidOperation:
            raise InvalidArgument(f"Invalid amount: {amount!r}")
        if not value.is_finite():
            raise InvalidArgument(f"Invalid amount: {amount!r}")
        if value < 0:
            raise InvalidArgument("Amount cannot be negative")
        return cls(value, currency)

    def _check_currency(self, other: "Money", operation: str) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatch(
                f"Cannot {operation} money with different currencies "
                f"({self.currency.code} and {other.currency.code})"
            )

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other, "subtract")
        result = self.amount - other.amount
        if result < 0:
            raise InvalidArgument("Resulting amount cannot be negative")
        return Money(result, self.currency)

    def __mul__(self, multiplier: Number) -> "Money":
        if isinstance(multiplier, Money):
            return NotImplemented
        if not isinstance(multiplier, Decimal):
            multiplier = Decimal(str(multiplier))
        return Money(self.amount * multiplier, self.currency)

    __rmul__ = __mul__

    def __lt__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount < other.amount

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    def convert_to(self, target: Currency, exchange_rate: Decimal) -> "Money":
        """Convert with an explicit rate (target units per source unit), rounded to 4 dp."""
        if target == self.currency:
            return self
        return Money(round_half_away(self.amount * exchange_rate, 4), target)

    def rounded(self, places: int) -> "Money":
        return Money(round_half_away(self.amount, places), self.currency)

    def __str__(self) -> str:
        return f"{round_half_away(self.amount, 4)} {self.currency.code}"
