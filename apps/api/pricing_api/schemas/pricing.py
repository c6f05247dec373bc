"""
Pricing Pydantic schemas for API request/response models.
"""
from datetime import date
from decimal import Decimal
from math import ceil
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_serializer

from pricing_api.services.best_price import BEST_PRICE_REASON, PriceCandidate


class BestPriceResponse(BaseModel):
    """The winning offer for a best-price query."""
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

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("unit_price", "total")
    def serialize_amount(self, v: Decimal) -> str:
        # Keep the fixed number of decimal places instead of a float
        return str(v)


class PriceCandidateResponse(BaseModel):
    """One stored offer as returned by the price listing."""
    id: int
    supplier_id: int
    supplier_name: str
    supplier_preferred: bool
    supplier_lead_time_days: int
    sku: str
    price_per_uom: Decimal
    currency: str
    min_qty: int
    valid_from: date
    valid_to: Optional[date] = None

    @classmethod
    def from_candidate(cls, candidate: PriceCandidate) -> "PriceCandidateResponse":
        return cls(
            id=candidate.entry_id,
            supplier_id=candidate.supplier_id,
            supplier_name=candidate.supplier_name,
            supplier_preferred=candidate.supplier_preferred,
            supplier_lead_time_days=candidate.supplier_lead_time_days,
            sku=candidate.sku,
            price_per_uom=candidate.unit_price.amount,
            currency=candidate.unit_price.currency.code,
            min_qty=candidate.minimum_quantity.value,
            valid_from=candidate.validity.valid_from,
            valid_to=candidate.validity.valid_to,
        )

    @field_serializer("price_per_uom")
    def serialize_price(self, v: Decimal) -> str:
        return str(v)


class PricePage(BaseModel):
    """A page of price candidates."""
    items: List[PriceCandidateResponse]
    page: int
    page_size: int
    total_count: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool

    @classmethod
    def create(cls, items: List[PriceCandidateResponse], total_count: int, page: int, page_size: int) -> "PricePage":
        total_pages = ceil(total_count / page_size) if page_size else 0
        return cls(
            items=items,
            page=page,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_previous_page=page > 1,
            has_next_page=page < total_pages,
        )


def normalize_page(page: int, page_size: int, max_page_size: int) -> Tuple[int, int]:
    """Clamp page to >= 1 and page_size to 1..max_page_size."""
    return max(1, page), min(max(1, page_size), max_page_size)
