"""
Pricing router: best-price queries, price listing and CSV price-list import.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from pricing_api.core.config import get_settings
from pricing_api.core.deps import get_best_price_service, get_import_service
from pricing_api.db.session import get_db
from pricing_api.domain.errors import InvalidArgument, PersistenceFailure
from pricing_api.domain.value_objects import Quantity, Sku
from pricing_api.repositories.supplier_repository import SupplierRepository
from pricing_api.schemas.pricing import (
    BestPriceResponse,
    PriceCandidateResponse,
    PricePage,
    normalize_page,
)
from pricing_api.services.best_price import BestPriceService
from pricing_api.services.csv_reader import CSV_TEMPLATE
from pricing_api.services.price_import import PriceImportService
from pricing_api.services.price_validation import parse_iso_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["pricing"])
settings = get_settings()


@router.get("/best", response_model=BestPriceResponse)
def get_best_price(
    sku: str = Query(..., description="Product SKU"),
    qty: int = Query(..., description="Requested quantity"),
    currency: str = Query(..., description="Target currency code (EUR, USD, EGP)"),
    on_date: str = Query(..., alias="date", description="As-of date, YYYY-MM-DD"),
    service: BestPriceService = Depends(get_best_price_service),
):
    """
    Find the cheapest valid offer for a SKU and quantity, priced in the
    requested currency.

    Ties on unit price go to preferred suppliers, then shorter lead time,
    then the lower supplier id.
    """
    parsed_date = parse_iso_date(on_date.strip())
    if parsed_date is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date format. Expected YYYY-MM-DD."
        )

    try:
        best = service.get_best_price(sku, qty, currency, parsed_date)
    except InvalidArgument as e:
        logger.warning(f"Invalid best price request: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if best is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No valid price found for the specified SKU, quantity, currency and date"
        )

    return BestPriceResponse.model_validate(best)


@router.get("/prices", response_model=PricePage)
def list_prices(
    sku: Optional[str] = Query(None),
    quantity: Optional[int] = Query(None, description="Only offers whose minimum quantity is met"),
    valid_on: Optional[str] = Query(None, description="Only offers valid on this date, YYYY-MM-DD"),
    currency: Optional[str] = Query(None, description="Only offers priced in this currency"),
    supplier_id: Optional[int] = Query(None),
    page: int = Query(1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """
    List stored offers matching the given filters, paged.

    page is clamped to >= 1 and page_size to 1..MAX_PAGE_SIZE.
    """
    valid_on_date = None
    if valid_on:
        valid_on_date = parse_iso_date(valid_on.strip())
        if valid_on_date is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid valid_on date format. Expected YYYY-MM-DD."
            )

    try:
        sku_filter = Sku.create(sku) if sku else None
        quantity_filter = Quantity.create(quantity) if quantity is not None else None
    except InvalidArgument as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    page, page_size = normalize_page(page, page_size, settings.MAX_PAGE_SIZE)
    filters = dict(
        sku=sku_filter,
        quantity=quantity_filter,
        on_date=valid_on_date,
        currency=currency,
        supplier_id=supplier_id,
    )

    repo = SupplierRepository(db)
    total = repo.count_valid_candidates(**filters)
    candidates = repo.get_valid_candidates(**filters, offset=(page - 1) * page_size, limit=page_size)

    return PricePage.create(
        items=[PriceCandidateResponse.from_candidate(c) for c in candidates],
        total_count=total,
        page=page,
        page_size=page_size,
    )


@router.post("/prices/upload-csv")
async def upload_prices_csv(
    file: UploadFile = File(...),
    service: PriceImportService = Depends(get_import_service),
):
    """
    Import a supplier price list.

    Expected CSV layout (header line is skipped):
    SupplierId, Sku, ValidFrom, ValidTo, Currency, PricePerUom, MinQty

    Valid rows are imported together in one transaction; invalid rows and
    overlapping date ranges are reported back. Returns 200 when at least one
    row was imported and 400 (same body) when nothing was.
    """
    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are supported."
        )

    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided or file is empty."
        )
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File size exceeds {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB limit."
        )

    logger.info(f"Processing CSV upload: {file.filename}, Size: {len(content)} bytes")

    try:
        result = service.import_csv(content)
    except PersistenceFailure as e:
        logger.error(f"Price list import failed for {file.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to import price list. No entries were saved."
        )

    if not result.success:
        logger.warning(
            f"CSV import rejected: {result.summary.invalid_rows} invalid rows, "
            f"global errors: {result.summary.global_errors}"
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=result.to_dict())

    return result.to_dict()


@router.get("/prices/csv-template")
def get_csv_template():
    """Download a sample price-list CSV."""
    return PlainTextResponse(
        CSV_TEMPLATE,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="price_list_template.csv"'},
    )
