"""
Field-level validation of price-list CSV rows.

Each row is validated on its own; every problem is collected rather than
stopping at the first one, so a user can fix a row in a single pass.
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel, Field

from pricing_api.domain.errors import InvalidArgument
from pricing_api.domain.money import Currency
from pricing_api.domain.validity import ValidityInterval
from pricing_api.domain.value_objects import MAX_INT32, Sku
from pricing_api.services.csv_reader import CsvRow

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Bounds of the Numeric(18, 4) price column
PRICE_QUANTUM = Decimal("0.0001")
PRICE_LIMIT = Decimal("1e14")

# Row2 value of an OverlapError raised against data already in the database
PERSISTED_ROW = -1


class RowValidationResult(BaseModel):
    """Parsed values and findings for one CSV row."""
    row_number: int
    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    supplier_id: Optional[int] = None
    sku: Optional[str] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    currency: Optional[str] = None
    price: Optional[Decimal] = None
    min_qty: Optional[int] = None

    @property
    def key(self) -> Tuple[Optional[int], Optional[str]]:
        return (self.supplier_id, self.sku)

    @property
    def validity(self) -> ValidityInterval:
        return ValidityInterval(self.valid_from, self.valid_to)


class OverlapError(BaseModel):
    """Two offers for the same supplier and SKU whose validity intervals overlap."""
    row1: int
    row2: int = Field(description=f"Other row number, or {PERSISTED_ROW} for an entry already stored")
    supplier_id: int
    sku: str
    message: str

    @property
    def against_persisted(self) -> bool:
        return self.row2 == PERSISTED_ROW


class ValidationSummary(BaseModel):
    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    global_errors: List[str] = Field(default_factory=list)
    results: List[RowValidationResult] = Field(default_factory=list)
    overlap_errors: List[OverlapError] = Field(default_factory=list)

    def valid_results(self) -> List[RowValidationResult]:
        return [r for r in self.results if r.is_valid]

    def invalid_results(self) -> List[RowValidationResult]:
        return [r for r in self.results if not r.is_valid]


def parse_iso_date(value: str) -> Optional[date]:
    """Parse an exact YYYY-MM-DD date, or return None."""
    if not ISO_DATE_PATTERN.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class CsvRowValidator:
    """
    Validates a single raw row.

    Args:
        supplier_exists: Lookup returning True when a supplier id is known
        product_exists: Lookup returning True when a product is registered for a SKU.
            Unknown products only produce a warning: prices may be loaded
            before the catalogue entry exists.
    """

    def __init__(
        self,
        supplier_exists: Callable[[int], bool],
        product_exists: Callable[[Sku], bool],
    ):
        self.supplier_exists = supplier_exists
        self.product_exists = product_exists

    def validate(self, row: CsvRow) -> RowValidationResult:
        result = RowValidationResult(row_number=row.row_number)

        self._validate_supplier(row, result)
        self._validate_sku(row, result)
        self._validate_dates(row, result)
        self._validate_currency(row, result)
        self._validate_price(row, result)
        self._validate_min_qty(row, result)

        result.is_valid = not result.errors
        return result

    def _validate_supplier(self, row: CsvRow, result: RowValidationResult) -> None:
        if not INTEGER_PATTERN.match(row.supplier_id):
            result.errors.append(f"Invalid supplier ID format: '{row.supplier_id}'")
            return

        supplier_id = int(row.supplier_id)
        if not 1 <= supplier_id <= MAX_INT32:
            result.errors.append(f"Invalid supplier ID format: '{row.supplier_id}'")
            return

        result.supplier_id = supplier_id
        if not self.supplier_exists(supplier_id):
            result.errors.append(f"Supplier with ID {supplier_id} does not exist")

    def _validate_sku(self, row: CsvRow, result: RowValidationResult) -> None:
        if not row.sku:
            result.errors.append("SKU is required")
            return

        try:
            sku = Sku.create(row.sku)
        except InvalidArgument as e:
            result.errors.append(f"Invalid SKU format: {e}")
            return

        result.sku = sku.value
        if not self.product_exists(sku):
            result.warnings.append(f"Product with SKU {sku.value} does not exist in the system")

    def _validate_dates(self, row: CsvRow, result: RowValidationResult) -> None:
        if not row.valid_from:
            result.errors.append("ValidFrom date is required")
        else:
            result.valid_from = parse_iso_date(row.valid_from)
            if result.valid_from is None:
                result.errors.append("Invalid ValidFrom date format. Expected yyyy-MM-dd")

        if not row.valid_to:
            return

        result.valid_to = parse_iso_date(row.valid_to)
        if result.valid_to is None:
            result.errors.append("Invalid ValidTo date format. Expected yyyy-MM-dd")
        elif result.valid_from is not None and result.valid_to <= result.valid_from:
            result.errors.append("ValidTo date must be after ValidFrom date")

    def _validate_currency(self, row: CsvRow, result: RowValidationResult) -> None:
        if not row.currency:
            result.errors.append("Currency is required")
            return

        try:
            result.currency = Currency.from_code(row.currency).code
        except InvalidArgument:
            result.errors.append(f"Unsupported currency code: {row.currency}")

    def _validate_price(self, row: CsvRow, result: RowValidationResult) -> None:
        if not DECIMAL_PATTERN.match(row.price_per_uom):
            result.errors.append(f"Invalid price format: '{row.price_per_uom}'")
            return

        try:
            price = Decimal(row.price_per_uom)
        except InvalidOperation:
            result.errors.append(f"Invalid price format: '{row.price_per_uom}'")
            return

        if price <= 0:
            result.errors.append("Price must be greater than zero")
            return
        if price >= PRICE_LIMIT:
            result.errors.append("Price exceeds the maximum of 99999999999999.9999")
            return
        if price.quantize(PRICE_QUANTUM) != price:
            result.errors.append("Price cannot have more than 4 decimal places")
            return
        result.price = price

    def _validate_min_qty(self, row: CsvRow, result: RowValidationResult) -> None:
        if not INTEGER_PATTERN.match(row.min_qty):
            result.errors.append(f"Invalid minimum quantity format: '{row.min_qty}'")
            return

        min_qty = int(row.min_qty)
        if min_qty <= 0:
            result.errors.append("Minimum quantity must be greater than zero")
            return
        if min_qty > MAX_INT32:
            result.errors.append(f"Invalid minimum quantity format: '{row.min_qty}'")
            return
        result.min_qty = min_qty
