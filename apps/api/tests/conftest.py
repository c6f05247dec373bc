"""
Test configuration and fixtures.
"""
import os
import pytest
from datetime import date
from decimal import Decimal
from typing import Dict, Generator, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Set test database URL before importing app
os.environ["DATABASE_URL"] = "sqlite://"

from pricing_api.main import app
from pricing_api.db.base import Base
from pricing_api.db.session import get_db
from pricing_api.domain.money import Currency, Money
from pricing_api.domain.validity import ValidityInterval
from pricing_api.domain.value_objects import Quantity
from pricing_api.models import PriceListEntry, Product, Supplier
from pricing_api.services.best_price import PriceCandidate


# One in-memory database shared by every connection of a test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a database session on a fresh schema for the test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def suppliers(db: Session) -> Dict[str, Supplier]:
    """Three suppliers with different preference and lead times."""
    created = {
        "acme": Supplier(name="ACME Corporation", country="US", preferred=True, lead_time_days=2),
        "delta": Supplier(name="DeltaChem Ltd", country="EG", preferred=False, lead_time_days=1),
        "euro": Supplier(name="EuroSupply GmbH", country="DE", preferred=True, lead_time_days=3),
    }
    db.add_all(created.values())
    db.commit()
    for supplier in created.values():
        db.refresh(supplier)
    return created


@pytest.fixture
def products(db: Session) -> List[Product]:
    created = [
        Product(sku="SKU-1001", name="Industrial Solvent A", unit_of_measure="L", hazard_class="Flammable"),
        Product(sku="SKU-1002", name="Chemical Compound B", unit_of_measure="KG"),
    ]
    db.add_all(created)
    db.commit()
    return created


def add_entry(
    db: Session,
    supplier: Supplier,
    sku: str = "SKU-1001",
    valid_from: date = date(2025, 1, 1),
    valid_to: Optional[date] = date(2025, 12, 31),
    currency: str = "USD",
    price: str = "25.00",
    min_qty: int = 1,
) -> PriceListEntry:
    """Insert and commit one price list entry."""
    entry = PriceListEntry(
        supplier_id=supplier.id,
        sku=sku,
        valid_from=valid_from,
        valid_to=valid_to,
        currency=currency,
        price_per_uom=Decimal(price),
        min_qty=min_qty,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def make_candidate(
    supplier_id: int,
    price: str,
    currency: str = "USD",
    preferred: bool = False,
    lead_time: int = 0,
    sku: str = "SKU-1001",
    min_qty: int = 1,
    valid_from: date = date(2025, 1, 1),
    valid_to: Optional[date] = None,
    name: Optional[str] = None,
) -> PriceCandidate:
    """Build an in-memory PriceCandidate for selector tests."""
    return PriceCandidate(
        entry_id=supplier_id * 100,
        supplier_id=supplier_id,
        supplier_name=name or f"Supplier {supplier_id}",
        supplier_preferred=preferred,
        supplier_lead_time_days=lead_time,
        sku=sku,
        unit_price=Money(Decimal(price), Currency(currency)),
        minimum_quantity=Quantity(min_qty),
        validity=ValidityInterval(valid_from, valid_to),
    )
