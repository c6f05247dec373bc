"""
Product catalogue router.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pricing_api.core.config import get_settings
from pricing_api.db.session import get_db
from pricing_api.domain.errors import InvalidArgument
from pricing_api.domain.value_objects import Sku
from pricing_api.models.product import Product
from pricing_api.repositories.product_repository import ProductRepository
from pricing_api.schemas.pricing import normalize_page
from pricing_api.schemas.products import ProductCreate, ProductListResponse, ProductResponse

router = APIRouter(prefix="/products", tags=["products"])
settings = get_settings()


def parse_sku(value: str) -> Sku:
    """Parse a SKU, raising 400 if malformed."""
    try:
        return Sku.create(value)
    except InvalidArgument as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    """
    Register a product.

    The SKU is normalized to uppercase; registering the same SKU twice
    returns 409.
    """
    sku = parse_sku(payload.sku)
    repo = ProductRepository(db)
    if repo.exists_by_sku(sku):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Product with SKU {sku} already exists"
        )

    product = repo.add(Product(
        sku=sku.value,
        name=payload.name.strip(),
        unit_of_measure=payload.unit_of_measure.strip().upper(),
        hazard_class=payload.hazard_class,
    ))
    db.commit()
    db.refresh(product)
    return ProductResponse.model_validate(product)


@router.get("", response_model=ProductListResponse)
def list_products(
    page: int = Query(1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    page, page_size = normalize_page(page, page_size, settings.MAX_PAGE_SIZE)
    repo = ProductRepository(db)
    products = repo.list(offset=(page - 1) * page_size, limit=page_size)
    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        total=repo.count(),
    )


@router.get("/{sku}", response_model=ProductResponse)
def get_product(sku: str, db: Session = Depends(get_db)):
    product = ProductRepository(db).get_by_sku(parse_sku(sku))
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with SKU {sku} not found"
        )
    return ProductResponse.model_validate(product)
