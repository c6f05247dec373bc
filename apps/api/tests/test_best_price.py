"""
Unit tests for best price selection.

Tests the ranking chain one key at a time, currency conversion of candidates,
rounding of the result, and argument validation in BestPriceService.
"""
import pytest
from datetime import date
from decimal import Decimal
from typing import List

from conftest import make_candidate
from pricing_api.domain.errors import InvalidArgument, UnsupportedCurrency
from pricing_api.domain.money import USD
from pricing_api.domain.value_objects import Quantity, Sku
from pricing_api.services.best_price import (
    BEST_PRICE_REASON,
    BestPriceSelector,
    BestPriceService,
    PriceCandidate,
    RankedCandidate,
    rank,
)
from pricing_api.services.currency import InMemoryRateProvider

ON_DATE = date(2025, 6, 1)


class FixedRateConverter:
    """Converter with one hard-coded rate per currency pair."""

    def __init__(self, rates=None):
        self.rates = rates or {}
        self.calls = []

    def convert(self, amount, from_code, to_code):
        self.calls.append((from_code, to_code))
        if from_code == to_code:
            return amount
        if (from_code, to_code) not in self.rates:
            raise UnsupportedCurrency(f"No rate for {from_code}->{to_code}")
        return amount * self.rates[(from_code, to_code)]


class FakeLookup:
    """Candidate lookup returning a fixed list and recording calls."""

    def __init__(self, candidates: List[PriceCandidate]):
        self.candidates = candidates
        self.calls = []

    def get_valid_candidates(self, sku=None, quantity=None, on_date=None, currency=None, supplier_id=None):
        self.calls.append((sku, quantity, on_date))
        return self.candidates


def select(candidates, quantity=10, converter=None):
    selector = BestPriceSelector(converter or FixedRateConverter())
    return selector.select(Sku.create("SKU-1001"), Quantity.create(quantity), USD, ON_DATE, candidates)


class TestSelection:
    """Test the documented selection scenarios."""

    def test_lowest_price_wins(self):
        """B at $25 beats A at $30 and C at $28."""
        candidates = [
            make_candidate(1, "30.00", preferred=False, lead_time=7, name="Supplier A"),
            make_candidate(2, "25.00", preferred=True, lead_time=5, name="Supplier B"),
            make_candidate(3, "28.00", preferred=False, lead_time=3, name="Supplier C"),
        ]
        best = select(candidates)

        assert best.supplier_name == "Supplier B"
        assert best.supplier_id == 2
        assert best.unit_price == Decimal("25.00")
        assert best.total == Decimal("250.00")
        assert best.currency == "USD"
        assert best.quantity == 10
        assert best.reason == BEST_PRICE_REASON

    def test_converted_price_used(self):
        """EUR 20.00 priced in USD at 1.10 gives 22.00 per unit, 220.00 total."""
        converter = FixedRateConverter({("EUR", "USD"): Decimal("1.10")})
        best = select([make_candidate(1, "20.00", currency="EUR")], converter=converter)

        assert best.unit_price == Decimal("22.00")
        assert best.total == Decimal("220.00")
        assert best.currency == "USD"
        assert converter.calls == [("EUR", "USD")]

    def test_empty_candidates_returns_none(self):
        assert select([]) is None

    def test_rounding(self):
        """Unit price keeps 4 places, total 2 places, ties away from zero."""
        best = select([make_candidate(1, "1.00005")], quantity=1)
        assert str(best.unit_price) == "1.0001"
        assert str(best.total) == "1.00"

        best = select([make_candidate(1, "0.125")], quantity=1)
        assert str(best.total) == "0.13"

    def test_unsupported_candidate_currency_propagates(self):
        """A candidate that cannot be converted aborts the whole request."""
        candidates = [
            make_candidate(1, "10.00", currency="USD"),
            make_candidate(2, "5.00", currency="GBP"),
        ]
        with pytest.raises(UnsupportedCurrency):
            select(candidates)

    def test_ineligible_candidates_dropped(self):
        """Candidates not valid on the date or above the quantity are ignored."""
        candidates = [
            make_candidate(1, "1.00", min_qty=50),
            make_candidate(2, "2.00", valid_from=date(2025, 1, 1), valid_to=date(2025, 3, 31)),
            make_candidate(3, "3.00", sku="SKU-9999"),
            make_candidate(4, "9.00"),
        ]
        assert select(candidates).supplier_id == 4

    def test_only_ineligible_candidates_returns_none(self):
        assert select([make_candidate(1, "1.00", min_qty=50)]) is None


class TestTieBreaks:
    """Each ranking key only applies when every earlier key ties."""

    def test_preferred_breaks_price_tie(self):
        candidates = [
            make_candidate(1, "25.00", preferred=False, lead_time=1),
            make_candidate(2, "25.00", preferred=True, lead_time=9),
        ]
        assert select(candidates).supplier_id == 2

    def test_lead_time_breaks_preference_tie(self):
        candidates = [
            make_candidate(1, "25.00", preferred=True, lead_time=5),
            make_candidate(2, "25.00", preferred=True, lead_time=3),
        ]
        assert select(candidates).supplier_id == 2

    def test_supplier_id_breaks_remaining_tie(self):
        candidates = [
            make_candidate(7, "25.00", preferred=True, lead_time=3),
            make_candidate(4, "25.00", preferred=True, lead_time=3),
        ]
        assert select(candidates).supplier_id == 4

    def test_price_beats_preference(self):
        candidates = [
            make_candidate(1, "24.99", preferred=False, lead_time=30),
            make_candidate(2, "25.00", preferred=True, lead_time=0),
        ]
        assert select(candidates).supplier_id == 1

    def test_tie_on_converted_price(self):
        """Prices compare after conversion, so equal converted prices tie."""
        converter = FixedRateConverter({("EUR", "USD"): Decimal("1.25")})
        candidates = [
            make_candidate(1, "25.00", currency="USD", preferred=False),
            make_candidate(2, "20.00", currency="EUR", preferred=True),
        ]
        assert select(candidates, converter=converter).supplier_id == 2

    def test_rank_orders_full_list(self):
        ranked = rank([
            RankedCandidate(make_candidate(3, "10", preferred=False, lead_time=1), Decimal("10"), Decimal("10")),
            RankedCandidate(make_candidate(2, "10", preferred=True, lead_time=4), Decimal("10"), Decimal("10")),
            RankedCandidate(make_candidate(1, "10", preferred=True, lead_time=4), Decimal("10"), Decimal("10")),
            RankedCandidate(make_candidate(5, "9", preferred=False, lead_time=9), Decimal("9"), Decimal("9")),
        ])
        assert [r.candidate.supplier_id for r in ranked] == [5, 1, 2, 3]

    def test_winner_is_never_more_expensive(self):
        candidates = [make_candidate(i, price) for i, price in enumerate(["5.5", "3.25", "7", "3.26"], start=1)]
        best = select(candidates, quantity=1)
        assert all(best.unit_price <= c.unit_price.amount for c in candidates)


class TestBestPriceService:
    """Test request validation and lookup wiring."""

    def test_returns_best_price(self):
        lookup = FakeLookup([make_candidate(1, "30.00"), make_candidate(2, "25.00")])
        service = BestPriceService(lookup, FixedRateConverter())

        best = service.get_best_price("sku-1001", 10, "usd", ON_DATE)

        assert best.supplier_id == 2
        assert best.sku == "SKU-1001"
        sku, quantity, on_date = lookup.calls[0]
        assert sku == Sku("SKU-1001")
        assert quantity == Quantity(10)
        assert on_date == ON_DATE

    def test_no_candidates_returns_none(self):
        service = BestPriceService(FakeLookup([]), FixedRateConverter())
        assert service.get_best_price("SKU-1001", 10, "USD", ON_DATE) is None

    @pytest.mark.parametrize("sku,quantity,currency", [
        ("", 10, "USD"),
        ("BAD SKU", 10, "USD"),
        ("SKU-1001", 0, "USD"),
        ("SKU-1001", -5, "USD"),
        ("SKU-1001", 10, "GBP"),
        ("SKU-1001", 10, ""),
    ])
    def test_invalid_arguments_rejected_before_lookup(self, sku, quantity, currency):
        lookup = FakeLookup([make_candidate(1, "25.00")])
        service = BestPriceService(lookup, FixedRateConverter())

        with pytest.raises(InvalidArgument):
            service.get_best_price(sku, quantity, currency, ON_DATE)
        assert lookup.calls == []

    def test_with_rate_table_converter(self):
        converter = InMemoryRateProvider({"EUR": Decimal("1"), "USD": Decimal("1.1")})
        lookup = FakeLookup([make_candidate(1, "20.00", currency="EUR")])
        best = BestPriceService(lookup, converter).get_best_price("SKU-1001", 10, "USD", ON_DATE)

        assert best.unit_price == Decimal("22.0000")
        assert best.total == Decimal("220.00")
