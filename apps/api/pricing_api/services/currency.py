"""
Currency conversion.

Rates are quoted against a single base currency (EUR by default): a rate of
1.09 for USD means 1 EUR = 1.09 USD. Converting between two non-base
currencies goes through the base.
"""
import logging
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Protocol

from pricing_api.core.config import get_settings
from pricing_api.domain.errors import InvalidArgument, UnsupportedCurrency
from pricing_api.domain.money import round_half_away

logger = logging.getLogger(__name__)


class CurrencyConverter(Protocol):
    """Anything that can convert an amount between two currency codes."""

    def convert(self, amount: Decimal, from_code: str, to_code: str) -> Decimal:
        ...


class InMemoryRateProvider:
    """
    Static rate table converter.

    Args:
        rates: Units of each currency per one unit of the base currency.
            Defaults to the EXCHANGE_RATES setting.
    """

    def __init__(self, rates: Optional[Mapping[str, Decimal]] = None):
        source = rates if rates is not None else get_settings().EXCHANGE_RATES
        self._rates: Dict[str, Decimal] = {code.upper(): Decimal(rate) for code, rate in source.items()}

    def supported_currencies(self) -> List[str]:
        return list(self._rates.keys())

    def is_supported(self, code: str) -> bool:
        return bool(code) and code.strip().upper() in self._rates

    def _rate(self, code: str) -> Decimal:
        rate = self._rates.get(code.strip().upper())
        if rate is None:
            raise UnsupportedCurrency(
                f"Unsupported currency: '{code}'. Supported currencies: {', '.join(self._rates)}"
            )
        return rate

    def convert(self, amount: Decimal, from_code: str, to_code: str) -> Decimal:
        """
        Convert an amount, rounded to 4 decimal places (half away from zero).

        Raises:
            InvalidArgument: blank currency codes or a negative amount
            UnsupportedCurrency: either code is not in the rate table
        """
        if not from_code or not from_code.strip():
            raise InvalidArgument("Source currency cannot be empty")
        if not to_code or not to_code.strip():
            raise InvalidArgument("Target currency cannot be empty")
        if amount < 0:
            raise InvalidArgument("Amount cannot be negative")

        from_rate = self._rate(from_code)
        to_rate = self._rate(to_code)
        if from_code.strip().upper() == to_code.strip().upper():
            return amount

        converted = round_half_away(amount / from_rate * to_rate, 4)
        logger.debug(f"Converted {amount} {from_code} to {converted} {to_code}")
        return converted
