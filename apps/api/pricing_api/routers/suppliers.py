"""
Supplier reference data router.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pricing_api.core.config import get_settings
from pricing_api.db.session import get_db
from pricing_api.models.supplier import Supplier
from pricing_api.repositories.supplier_repository import SupplierRepository
from pricing_api.schemas.pricing import normalize_page
from pricing_api.schemas.suppliers import SupplierCreate, SupplierListResponse, SupplierResponse

router = APIRouter(prefix="/suppliers", tags=["suppliers"])
settings = get_settings()


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(payload: SupplierCreate, db: Session = Depends(get_db)):
    """Register a supplier that can then publish price lists."""
    supplier = SupplierRepository(db).add(Supplier(
        name=payload.name.strip(),
        country=payload.country,
        preferred=payload.preferred,
        lead_time_days=payload.lead_time_days,
    ))
    db.commit()
    db.refresh(supplier)
    return SupplierResponse.model_validate(supplier)


@router.get("", response_model=SupplierListResponse)
def list_suppliers(
    page: int = Query(1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    page, page_size = normalize_page(page, page_size, settings.MAX_PAGE_SIZE)
    repo = SupplierRepository(db)
    suppliers = repo.list(offset=(page - 1) * page_size, limit=page_size)
    return SupplierListResponse(
        items=[SupplierResponse.model_validate(s) for s in suppliers],
        total=repo.count(),
    )


@router.get("/{supplier_id}", response_model=SupplierResponse)
def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    supplier = SupplierRepository(db).get_by_id(supplier_id)
    if not supplier:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Supplier with ID {supplier_id} not found"
        )
    return SupplierResponse.model_validate(supplier)
