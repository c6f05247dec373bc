"""
Supplier model.
"""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from pricing_api.db.base import Base


class Supplier(Base):
    """A vendor that publishes price lists."""
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    country = Column(String(100))
    preferred = Column(Boolean, nullable=False, default=False)
    lead_time_days = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    price_list_entries = relationship(
        "PriceListEntry", back_populates="supplier", cascade="all, delete-orphan"
    )
