"""
Best price selection across supplier price-list entries.

Given a SKU, quantity, target currency and date, every eligible supplier
offer is converted into the target currency and ranked. The ranking is an
explicit chain of sort keys so the tie-break order can be read (and tested)
one key at a time:

1. converted unit price, lowest first
2. preferred suppliers first
3. shortest lead time
4. lowest supplier id (final, deterministic tie-break)
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple

from pricing_api.domain.money import Currency, Money, round_half_away
from pricing_api.domain.validity import ValidityInterval
from pricing_api.domain.value_objects import Quantity, Sku
from pricing_api.services.currency import CurrencyConverter

logger = logging.getLogger(__name__)

BEST_PRICE_REASON = "Lowest unit price (then Preferred, LeadTime, SupplierId)"


@dataclass(frozen=True)
class PriceCandidate:
    """Read-only projection of one persisted offer."""
    entry_id: int
    supplier_id: int
    supplier_name: str
    supplier_preferred: bool
    supplier_lead_time_days: int
    sku: str
    unit_price: Money
    minimum_quantity: Quantity
    validity: ValidityInterval

    def is_eligible(self, sku: Sku, quantity: Quantity, on_date: date) -> bool:
        return (
            self.sku == sku.value
            and self.validity.contains(on_date)
            and quantity.meets_minimum(self.minimum_quantity)
        )


@dataclass(frozen=True)
class RankedCandidate:
    """A candidate with its prices expressed in the requested currency."""
    candidate: PriceCandidate
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class BestPrice:
    sku: str
    quantity: int
    currency: str
    unit_price: Decimal
    total: Decimal
    supplier_id: int
    supplier_name: str
    supplier_preferred: bool
    supplier_lead_time_days: int
    reason: str = BEST_PRICE_REASON


# (name, key selector, descending)
RANKING_KEYS: Tuple[Tuple[str, Callable[[RankedCandidate], Any], bool], ...] = (
    ("unit_price", lambda r: r.unit_price, False),
    ("supplier_preferred", lambda r: r.candidate.supplier_preferred, True),
    ("supplier_lead_time_days", lambda r: r.candidate.supplier_lead_time_days, False),
    ("supplier_id", lambda r: r.candidate.supplier_id, False),
)


def rank(ranked: Sequence[RankedCandidate]) -> List[RankedCandidate]:
    """
    Order candidates by RANKING_KEYS.

    Applies one stable sort per key, least significant key first, so each
    earlier key only reorders within ties of the keys before it.
    """
    ordered = list(ranked)
    for _, key, descending in reversed(RANKING_KEYS):
        ordered.sort(key=key, reverse=descending)
    return ordered


class CandidateLookup(Protocol):
    """Storage query returning offers that are valid for a filter."""

    def get_valid_candidates(
        self,
        sku: Optional[Sku] = None,
        quantity: Optional[Quantity] = None,
        on_date: Optional[date] = None,
        currency: Optional[str] = None,
        supplier_id: Optional[int] = None,
    ) -> List[PriceCandidate]:
        ...


class BestPriceSelector:
    """
    Ranks a candidate set into a single winner.

    Currency conversion errors are not caught: skipping a candidate that
    cannot be converted could silently report the wrong winner.
    """

    def __init__(self, converter: CurrencyConverter):
        self.converter = converter

    def convert(self, candidate: PriceCandidate, quantity: Quantity, currency: Currency) -> RankedCandidate:
        unit_price = self.converter.convert(
            candidate.unit_price.amount,
            candidate.unit_price.currency.code,
            currency.code,
        )
        return RankedCandidate(
            candidate=candidate,
            unit_price=unit_price,
            total_price=unit_price * quantity.value,
        )

    def select(
        self,
        sku: Sku,
        quantity: Quantity,
        currency: Currency,
        on_date: date,
        candidates: Sequence[PriceCandidate],
    ) -> Optional[BestPrice]:
        """
        Pick the best offer, or None when there is nothing to choose from.

        Candidates that are not valid on the date, are for another SKU, or
        require a larger minimum quantity are dropped before ranking.
        """
        eligible = [c for c in candidates if c.is_eligible(sku, quantity, on_date)]
        if len(eligible) < len(candidates):
            logger.debug(f"Dropped {len(candidates) - len(eligible)} ineligible candidates for SKU {sku}")

        if not eligible:
            return None

        ranked = rank([self.convert(c, quantity, currency) for c in eligible])
        best = ranked[0]

        return BestPrice(
            sku=sku.value,
            quantity=quantity.value,
            currency=currency.code,
            unit_price=round_half_away(best.unit_price, 4),
            total=round_half_away(best.total_price, 2),
            supplier_id=best.candidate.supplier_id,
            supplier_name=best.candidate.supplier_name,
            supplier_preferred=best.candidate.supplier_preferred,
            supplier_lead_time_days=best.candidate.supplier_lead_time_days,
        )


class BestPriceService:
    """
    Resolves best-price requests: validate, look up candidates, rank.

    Args:
        lookup: Candidate source (normally the supplier repository)
        converter: Currency converter used to normalize candidate prices
    """

    def __init__(self, lookup: CandidateLookup, converter: CurrencyConverter):
        self.lookup = lookup
        self.selector = BestPriceSelector(converter)

    def get_best_price(self, sku: str, quantity: int, currency: str, on_date: date) -> Optional[BestPrice]:
        """
        Find the best offer for a request.

        Returns:
            BestPrice, or None when no supplier offers the SKU for that date and quantity

        Raises:
            InvalidArgument: malformed SKU, non-positive quantity or unsupported
                currency; raised before any storage lookup
            UnsupportedCurrency: a candidate is priced in a currency the
                converter does not know
        """
        logger.info(
            f"Handling best price query for SKU: {sku}, Qty: {quantity}, Currency: {currency}, Date: {on_date}"
        )
        parsed_sku = Sku.create(sku)
        parsed_quantity = Quantity.create(quantity)
        target_currency = Currency.from_code(currency)

        candidates = self.lookup.get_valid_candidates(
            sku=parsed_sku,
            quantity=parsed_quantity,
            on_date=on_date,
        )
        if not candidates:
            logger.info(f"No valid price candidates found for SKU: {sku}, Qty: {quantity}, Date: {on_date}")
            return None

        logger.debug(f"Found {len(candidates)} price candidates for SKU: {parsed_sku}")
        best = self.selector.select(parsed_sku, parsed_quantity, target_currency, on_date, candidates)
        if best is None:
            logger.info(f"No eligible price candidates left for SKU: {sku} after re-checking date and quantity")
            return None

        logger.info(
            f"Best price selected: Supplier {best.supplier_name} ({best.supplier_id}) - "
            f"Unit: {best.unit_price} {best.currency}, Total: {best.total} {best.currency}"
        )
        return best
