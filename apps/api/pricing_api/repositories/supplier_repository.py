"""
Supplier persistence and price-candidate lookup.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from pricing_api.domain.money import Currency, Money
from pricing_api.domain.validity import ValidityInterval
from pricing_api.domain.value_objects import Quantity, Sku
from pricing_api.models.price_list_entry import PriceListEntry
from pricing_api.models.supplier import Supplier
from pricing_api.services.best_price import PriceCandidate


class SupplierRepository:
    """
    Repository for suppliers and the offers they publish.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, supplier_id: int) -> Optional[Supplier]:
        return self._session.get(Supplier, supplier_id)

    def exists(self, supplier_id: int) -> bool:
        stmt = select(Supplier.id).where(Supplier.id == supplier_id).limit(1)
        return self._session.execute(stmt).scalar_one_or_none() is not None

    def list(self, offset: int = 0, limit: int = 100) -> List[Supplier]:
        stmt = select(Supplier).order_by(Supplier.name, Supplier.id).offset(offset).limit(limit)
        return list(self._session.execute(stmt).scalars().all())

    def count(self) -> int:
        return self._session.execute(select(func.count(Supplier.id))).scalar_one()

    def add(self, supplier: Supplier) -> Supplier:
        self._session.add(supplier)
        self._session.flush()
        return supplier

    def _candidates_query(
        self,
        sku: Optional[Sku],
        quantity: Optional[Quantity],
        on_date: Optional[date],
        currency: Optional[str],
        supplier_id: Optional[int],
    ) -> Select:
        stmt = select(PriceListEntry, Supplier).join(Supplier, PriceListEntry.supplier_id == Supplier.id)

        if sku is not None:
            stmt = stmt.where(PriceListEntry.sku == sku.value)
        if quantity is not None:
            stmt = stmt.where(PriceListEntry.min_qty <= quantity.value)
        if on_date is not None:
            stmt = stmt.where(
                PriceListEntry.valid_from <= on_date,
                or_(PriceListEntry.valid_to.is_(None), PriceListEntry.valid_to >= on_date),
            )
        if currency:
            stmt = stmt.where(PriceListEntry.currency == currency.strip().upper())
        if supplier_id is not None:
            stmt = stmt.where(PriceListEntry.supplier_id == supplier_id)
        return stmt

    def get_valid_candidates(
        self,
        sku: Optional[Sku] = None,
        quantity: Optional[Quantity] = None,
        on_date: Optional[date] = None,
        currency: Optional[str] = None,
        supplier_id: Optional[int] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[PriceCandidate]:
        """
        Offers matching every filter that is not None, as PriceCandidates.

        Rows are projected as stored; a currency code outside the supported
        set is carried through so the converter can reject it.
        """
        stmt = self._candidates_query(sku, quantity, on_date, currency, supplier_id).order_by(PriceListEntry.id)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        return [
            PriceCandidate(
                entry_id=entry.id,
                supplier_id=supplier.id,
                supplier_name=supplier.name,
                supplier_preferred=bool(supplier.preferred),
                supplier_lead_time_days=supplier.lead_time_days or 0,
                sku=entry.sku,
                unit_price=Money(Decimal(entry.price_per_uom), Currency(entry.currency)),
                minimum_quantity=Quantity(entry.min_qty),
                validity=ValidityInterval(entry.valid_from, entry.valid_to),
            )
            for entry, supplier in self._session.execute(stmt).all()
        ]

    def count_valid_candidates(
        self,
        sku: Optional[Sku] = None,
        quantity: Optional[Quantity] = None,
        on_date: Optional[date] = None,
        currency: Optional[str] = None,
        supplier_id: Optional[int] = None,
    ) -> int:
        subquery = self._candidates_query(sku, quantity, on_date, currency, supplier_id).subquery()
        return self._session.execute(select(func.count()).select_from(subquery)).scalar_one()
