"""
Product catalogue model.
"""
from sqlalchemy import Column, DateTime, Integer, String, func

from pricing_api.db.base import Base


class Product(Base):
    """A catalogue item identified by SKU."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sku = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    unit_of_measure = Column(String(10), nullable=False, default="EA")
    hazard_class = Column(String(50))  # None for non-hazardous goods
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())
