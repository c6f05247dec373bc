"""
Price list entry persistence.
"""
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from pricing_api.domain.validity import ValidityInterval
from pricing_api.models.price_list_entry import PriceListEntry


class PriceListEntryRepository:

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_supplier_and_sku(self, supplier_id: int, sku: str) -> List[PriceListEntry]:
        stmt = (
            select(PriceListEntry)
            .where(PriceListEntry.supplier_id == supplier_id, PriceListEntry.sku == sku)
            .order_by(PriceListEntry.valid_from)
        )
        return list(self._session.execute(stmt).scalars().all())

    def existing_intervals(self, supplier_id: int, sku: str) -> List[ValidityInterval]:
        """Validity intervals already stored for a (supplier, SKU) pair."""
        return [entry.validity for entry in self.get_by_supplier_and_sku(supplier_id, sku)]

    def add_all(self, entries: Sequence[PriceListEntry]) -> int:
        """Stage entries on the session. Nothing is committed here."""
        self._session.add_all(entries)
        self._session.flush()
        return len(entries)
