"""
Seed script for the pricing development database.

Creates sample suppliers, products and price list entries for local
development. Does nothing if suppliers already exist.

Usage:
    cd apps/api
    python -m pricing_api.scripts.seed_demo
"""
import random
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from pricing_api.db.base import Base
from pricing_api.db.session import SessionLocal, engine
from pricing_api.db.unit_of_work import UnitOfWork
from pricing_api.domain.money import round_half_away
from pricing_api.domain.validity import ValidityInterval
from pricing_api.models import PriceListEntry, Product, Supplier

SUPPLIERS = [
    ("ACME Corporation", "US", True, 2),
    ("DeltaChem Ltd", "EG", False, 1),
    ("EuroSupply GmbH", "DE", True, 3),
    ("ChemTrade Inc", "US", False, 5),
    ("Alpine Chemicals", "CH", True, 4),
    ("Nordic Supply Co", "NO", False, 6),
    ("MediterraneanChem", "IT", True, 3),
    ("Asia Pacific Ltd", "SG", False, 8),
    ("British Materials", "GB", True, 2),
    ("Canadian Chemicals", "CA", False, 7),
]

PRODUCTS = [
    ("SKU-1001", "Industrial Solvent A", "L", "Flammable"),
    ("SKU-1002", "Chemical Compound B", "KG", "Corrosive"),
    ("SKU-1003", "Polymer Base C", "KG", None),
    ("SKU-1004", "Cleaning Agent D", "L", "Hazardous"),
    ("SKU-1005", "Synthetic Resin E", "KG", None),
    ("SKU-1006", "Metal Coating F", "L", "Toxic"),
    ("SKU-1007", "Adhesive Gel G", "KG", "Flammable"),
    ("SKU-1008", "Protective Film H", "M2", None),
    ("SKU-1009", "Catalyst Powder I", "KG", "Reactive"),
    ("SKU-1010", "Lubricant Oil J", "L", None),
]

# Rough price level of each currency relative to USD list prices
CURRENCY_FACTORS = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.85"),
    "EGP": Decimal("30"),
}


def add_months(day: date, months: int) -> date:
    """Shift a first-of-month date by whole months."""
    month_index = day.month - 1 + months
    return day.replace(year=day.year + month_index // 12, month=month_index % 12 + 1)


def sample_price_entries(suppliers: List[Supplier], products: List[Product], seed: int = 42) -> List[PriceListEntry]:
    """
    Build 2-4 offers per product from distinct suppliers.

    Uses a fixed random seed so every run produces the same data. Each
    supplier appears at most once per SKU, so offers never overlap.
    """
    rng = random.Random(seed)
    entries = []

    for product_index, product in enumerate(products):
        for supplier in rng.sample(suppliers, rng.randint(2, 4)):
            base_price = Decimal(10 + product_index * 5 + rng.randint(1, 19))
            currency = rng.choice(list(CURRENCY_FACTORS))
            start = date(2025, rng.randint(1, 6), 1)
            end: Optional[date] = add_months(start, rng.randint(3, 11)) if rng.random() < 0.5 else None
            validity = ValidityInterval.create(start, end)

            entries.append(PriceListEntry(
                supplier_id=supplier.id,
                sku=product.sku,
                valid_from=validity.valid_from,
                valid_to=validity.valid_to,
                currency=currency,
                price_per_uom=round_half_away(base_price * CURRENCY_FACTORS[currency], 2),
                min_qty=rng.randint(1, 4) * 5,
            ))

    return entries


def seed_database(session: Session) -> None:
    """Seed the database with demo data."""
    existing = session.query(Supplier).count()
    if existing > 0:
        print(f"Database already contains {existing} suppliers. Skipping...")
        return

    print("Seeding database...")

    with UnitOfWork(session).transaction():
        suppliers = [
            Supplier(name=name, country=country, preferred=preferred, lead_time_days=lead_time)
            for name, country, preferred, lead_time in SUPPLIERS
        ]
        session.add_all(suppliers)
        session.flush()  # Get IDs
        print(f"Created {len(suppliers)} suppliers")

        products = [
            Product(sku=sku, name=name, unit_of_measure=uom, hazard_class=hazard)
            for sku, name, uom, hazard in PRODUCTS
        ]
        session.add_all(products)
        print(f"Created {len(products)} products")

        entries = sample_price_entries(suppliers, products)
        session.add_all(entries)
        print(f"Created {len(entries)} price list entries")

    print("Seeding complete.")


def main():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_database(session)
    finally:
        session.close()


if __name__ == "__main__":
    main()
