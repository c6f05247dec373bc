"""
Overlap detection for price-list imports.

Two offers from the same supplier for the same SKU must never be valid on the
same day. Conflicts are checked inside the uploaded batch and against the
entries already stored. Rows involved in a conflict are then demoted to
invalid by ``apply_overlaps``, which returns new results instead of editing
the validator's output.
"""
import logging
from collections import defaultdict
from typing import Callable, Dict, List, Sequence, Tuple

from pricing_api.domain.validity import ValidityInterval
from pricing_api.services.price_validation import (
    PERSISTED_ROW,
    OverlapError,
    RowValidationResult,
    ValidationSummary,
)

logger = logging.getLogger(__name__)

ExistingIntervalsLookup = Callable[[int, str], Sequence[ValidityInterval]]


class OverlapDetector:
    """
    Finds overlapping validity intervals among field-valid rows.

    Args:
        existing_intervals: Returns the stored intervals for a (supplier_id, sku).
            Called at most once per distinct pair in a batch.
    """

    def __init__(self, existing_intervals: ExistingIntervalsLookup):
        self.existing_intervals = existing_intervals

    def detect(self, results: Sequence[RowValidationResult]) -> List[OverlapError]:
        """
        All overlap errors for a batch: in-batch pairs first, then conflicts
        with stored entries, each in row order.
        """
        valid = [r for r in results if r.is_valid]
        return self.detect_within_batch(valid) + self.detect_against_persisted(valid)

    def detect_within_batch(self, valid: Sequence[RowValidationResult]) -> List[OverlapError]:
        groups: Dict[Tuple[int, str], List[RowValidationResult]] = defaultdict(list)
        for result in valid:
            groups[result.key].append(result)

        errors: List[OverlapError] = []
        for (supplier_id, sku), rows in groups.items():
            for i, first in enumerate(rows):
                for second in rows[i + 1:]:
                    if first.validity.overlaps_with(second.validity):
                        errors.append(OverlapError(
                            row1=first.row_number,
                            row2=second.row_number,
                            supplier_id=supplier_id,
                            sku=sku,
                            message=(
                                f"Date ranges overlap for supplier {supplier_id} and SKU {sku} "
                                f"between rows {first.row_number} and {second.row_number}"
                            ),
                        ))

        # Same order a nested i < j scan over the batch would produce
        errors.sort(key=lambda e: (e.row1, e.row2))
        return errors

    def detect_against_persisted(self, valid: Sequence[RowValidationResult]) -> List[OverlapError]:
        cache: Dict[Tuple[int, str], Sequence[ValidityInterval]] = {}
        errors: List[OverlapError] = []

        for result in valid:
            supplier_id, sku = result.key
            if result.key not in cache:
                cache[result.key] = self.existing_intervals(supplier_id, sku)

            for existing in cache[result.key]:
                if result.validity.overlaps_with(existing):
                    errors.append(OverlapError(
                        row1=result.row_number,
                        row2=PERSISTED_ROW,
                        supplier_id=supplier_id,
                        sku=sku,
                        message=(
                            f"Date range overlaps with existing entry ({existing}) for supplier "
                            f"{supplier_id} and SKU {sku} at row {result.row_number}"
                        ),
                    ))

        if cache:
            logger.debug(f"Checked {len(valid)} rows against stored entries for {len(cache)} supplier/SKU pairs")
        return errors


def apply_overlaps(
    results: Sequence[RowValidationResult],
    overlap_errors: Sequence[OverlapError],
) -> List[RowValidationResult]:
    """
    Demote every still-valid row referenced by an overlap error.

    Each demoted row gets the message of every error that references it
    (once per error) and is marked invalid. Rows already invalid are left
    unchanged. Inputs are not modified.
    """
    messages: Dict[int, List[str]] = defaultdict(list)
    for error in overlap_errors:
        for row_number in (error.row1, error.row2):
            if row_number != PERSISTED_ROW and error.message not in messages[row_number]:
                messages[row_number].append(error.message)

    finalized: List[RowValidationResult] = []
    for result in results:
        row_messages = messages.get(result.row_number)
        if result.is_valid and row_messages:
            finalized.append(result.model_copy(update={
                "is_valid": False,
                "errors": result.errors + row_messages,
            }))
        else:
            finalized.append(result)
    return finalized


def build_summary(
    results: Sequence[RowValidationResult],
    overlap_errors: Sequence[OverlapError],
    global_errors: Sequence[str] = (),
) -> ValidationSummary:
    """Summary whose counts reflect the final (post-overlap) state of each row."""
    valid_rows = sum(1 for r in results if r.is_valid)
    return ValidationSummary(
        total_rows=len(results),
        valid_rows=valid_rows,
        invalid_rows=len(results) - valid_rows,
        global_errors=list(global_errors),
        results=list(results),
        overlap_errors=list(overlap_errors),
    )
