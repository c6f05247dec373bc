"""
FastAPI dependencies shared by the routers.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from pricing_api.db.session import get_db
from pricing_api.repositories.supplier_repository import SupplierRepository
from pricing_api.services.best_price import BestPriceService
from pricing_api.services.currency import CurrencyConverter, InMemoryRateProvider
from pricing_api.services.price_import import PriceImportService


def get_rate_provider() -> CurrencyConverter:
    """Converter backed by the configured EXCHANGE_RATES table."""
    return InMemoryRateProvider()


def get_best_price_service(
    db: Session = Depends(get_db),
    converter: CurrencyConverter = Depends(get_rate_provider),
) -> BestPriceService:
    return BestPriceService(SupplierRepository(db), converter)


def get_import_service(db: Session = Depends(get_db)) -> PriceImportService:
    return PriceImportService(db)
