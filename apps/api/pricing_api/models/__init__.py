"""
SQLAlchemy models for the pricing service.
"""
from pricing_api.models.supplier import Supplier
from pricing_api.models.product import Product
from pricing_api.models.price_list_entry import PriceListEntry


__all__ = [
    "Supplier",
    "Product",
    "PriceListEntry",
]
