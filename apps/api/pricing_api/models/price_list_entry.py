"""
Price list entry model.

One row is one supplier offer for a SKU over a validity interval. Entries for
the same (supplier, SKU) must not have overlapping intervals; the import
pipeline enforces this before inserting.
"""
from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from pricing_api.db.base import Base
from pricing_api.domain.validity import ValidityInterval


class PriceListEntry(Base):
    __tablename__ = "price_list_entries"
    __table_args__ = (
        Index("ix_price_list_entries_supplier_sku", "supplier_id", "sku"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False)
    sku = Column(String(50), nullable=False, index=True)
    valid_from = Column(Date, nullable=False)
    valid_to = Column(Date)  # NULL = open-ended
    currency = Column(String(3), nullable=False)
    price_per_uom = Column(Numeric(18, 4), nullable=False)
    min_qty = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, server_default=func.now())

    supplier = relationship("Supplier", back_populates="price_list_entries")

    @property
    def validity(self) -> ValidityInterval:
        return ValidityInterval(self.valid_from, self.valid_to)
