"""
Price list import: read, validate, check overlaps, persist.

A batch is imported all-or-nothing. Rows that fail validation are reported
and skipped; the remaining valid rows are written in a single transaction,
and if that write fails nothing from the batch is kept.
"""
import logging
from functools import lru_cache
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pricing_api.db.unit_of_work import UnitOfWork
from pricing_api.domain.errors import PersistenceFailure
from pricing_api.models.price_list_entry import PriceListEntry
from pricing_api.repositories.price_list_entry_repository import PriceListEntryRepository
from pricing_api.repositories.product_repository import ProductRepository
from pricing_api.repositories.supplier_repository import SupplierRepository
from pricing_api.services.csv_reader import PriceListCsvReader
from pricing_api.services.overlap_detection import OverlapDetector, apply_overlaps, build_summary
from pricing_api.services.price_validation import CsvRowValidator, RowValidationResult, ValidationSummary

logger = logging.getLogger(__name__)

EMPTY_FILE_ERROR = "CSV file is empty or contains no valid data rows."
NO_VALID_ROWS_ERROR = "No valid rows found in CSV file."
IMPORT_FAILED_MESSAGE = "Import failed. Please check the validation errors."


class ImportResult:
    """Result of an import operation."""

    def __init__(
        self,
        success: bool,
        message: str,
        summary: ValidationSummary,
        imported_count: int = 0,
    ):
        self.success = success
        self.message = message
        self.summary = summary
        self.imported_count = imported_count

    @classmethod
    def failure(cls, summary: ValidationSummary) -> "ImportResult":
        return cls(success=False, message=IMPORT_FAILED_MESSAGE, summary=summary)

    def to_dict(self) -> Dict:
        """Convert to dictionary for API response."""
        summary = self.summary
        return {
            "success": self.success,
            "message": self.message,
            "importedCount": self.imported_count,
            "summary": {
                "TotalRows": summary.total_rows,
                "ValidRows": summary.valid_rows,
                "InvalidRows": summary.invalid_rows,
                "OverlapErrorsCount": len(summary.overlap_errors),
            },
            "validationDetails": {
                "globalErrors": summary.global_errors,
                "errors": [
                    {
                        "rowNumber": r.row_number,
                        "errors": r.errors,
                        "warnings": r.warnings,
                    }
                    for r in summary.invalid_results()
                ],
                "overlapErrors": [
                    {
                        "row1": e.row1,
                        "row2": e.row2,
                        "supplierId": e.supplier_id,
                        "sku": e.sku,
                        "message": e.message,
                    }
                    for e in summary.overlap_errors
                ],
            },
        }


def to_entry(result: RowValidationResult) -> PriceListEntry:
    return PriceListEntry(
        supplier_id=result.supplier_id,
        sku=result.sku,
        valid_from=result.valid_from,
        valid_to=result.valid_to,
        currency=result.currency,
        price_per_uom=result.price,
        min_qty=result.min_qty,
    )


class PriceImportService:
    """
    Service for importing supplier price lists from CSV.

    Steps:
    - Decode and split the upload into rows
    - Validate every row on its own (supplier/product lookups are cached per batch)
    - Detect overlapping validity intervals, in the batch and against stored entries
    - Insert every row that is still valid in one transaction
    """

    def __init__(self, db: Session, reader: Optional[PriceListCsvReader] = None):
        """
        Initialize import service.

        Args:
            db: SQLAlchemy database session
            reader: CSV reader (default PriceListCsvReader)
        """
        self.db = db
        self.reader = reader or PriceListCsvReader()
        self.suppliers = SupplierRepository(db)
        self.products = ProductRepository(db)
        self.entries = PriceListEntryRepository(db)

    def validate_rows(self, file_bytes: bytes) -> ValidationSummary:
        """
        Validate an upload without writing anything.

        Returns:
            ValidationSummary with row results and overlap errors already
            folded in, or a summary carrying only the empty-file global error
        """
        read_result = self.reader.read(file_bytes)
        if not read_result.rows:
            logger.warning("CSV upload contained no data rows")
            return ValidationSummary(global_errors=[EMPTY_FILE_ERROR])

        supplier_exists = lru_cache(maxsize=None)(self.suppliers.exists)
        product_exists = lru_cache(maxsize=None)(self.products.exists_by_sku)
        validator = CsvRowValidator(supplier_exists, product_exists)

        results = [validator.validate(row) for row in read_result.rows]
        logger.info(
            f"Validated {len(results)} rows ({read_result.encoding}): "
            f"{sum(1 for r in results if r.is_valid)} passed field checks"
        )

        overlap_errors = OverlapDetector(self.entries.existing_intervals).detect(results)
        if overlap_errors:
            logger.info(f"Found {len(overlap_errors)} overlapping date ranges")

        return build_summary(apply_overlaps(results, overlap_errors), overlap_errors)

    def persist(self, valid: List[RowValidationResult]) -> int:
        """
        Insert valid rows in one transaction.

        Raises:
            PersistenceFailure: the write failed; nothing was committed
        """
        uow = UnitOfWork(self.db)
        try:
            with uow.transaction():
                return self.entries.add_all([to_entry(r) for r in valid])
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Failed to save price list entries: {e}") from e

    def import_csv(self, file_bytes: bytes) -> ImportResult:
        """
        Run the full import pipeline.

        Args:
            file_bytes: Raw uploaded file content

        Returns:
            ImportResult; success is False when the file is empty or no row
            survived validation, in which case nothing is written

        Raises:
            PersistenceFailure: saving the valid rows failed
        """
        logger.info("Starting CSV import")

        summary = self.validate_rows(file_bytes)
        if summary.global_errors:
            return ImportResult.failure(summary)

        valid = summary.valid_results()
        if not valid:
            logger.warning(f"No valid rows to import ({summary.invalid_rows} invalid)")
            summary.global_errors.append(NO_VALID_ROWS_ERROR)
            return ImportResult.failure(summary)

        imported = self.persist(valid)
        logger.info(f"Imported {imported} price entries, {summary.invalid_rows} rows had errors")

        return ImportResult(
            success=True,
            message=f"Successfully imported {imported} price entries. {summary.invalid_rows} rows had errors.",
            summary=summary,
            imported_count=imported,
        )
