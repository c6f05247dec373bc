"""
CSV reader for supplier price-list uploads.

Expected layout (header line is skipped, column names are not checked):

    SupplierId,Sku,ValidFrom,ValidTo,Currency,PricePerUom,MinQty
    1,SKU-1001,2025-01-01,2025-12-31,USD,25.50,10
"""
import logging
import re
from typing import List, Tuple

import chardet
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["SupplierId", "Sku", "ValidFrom", "ValidTo", "Currency", "PricePerUom", "MinQty"]
REQUIRED_FIELD_COUNT = len(CSV_COLUMNS)

# Only CR, LF and CRLF end a line; other Unicode breaks are field content
LINE_BREAK = re.compile(r"\r\n|\r|\n")

CSV_TEMPLATE = "\n".join([
    ",".join(CSV_COLUMNS),
    "1,SKU-1001,2025-01-01,2025-12-31,USD,25.50,10",
    "1,SKU-1002,2025-01-01,,EUR,18.75,5",
    "2,SKU-1001,2025-02-01,2025-11-30,USD,24.00,15",
    "2,SKU-1003,2025-01-15,2025-06-30,EGP,750.00,20",
]) + "\n"


class CsvRow(BaseModel):
    """One raw data line, fields trimmed but otherwise unparsed."""
    row_number: int = Field(description="Physical line number; the header is row 1")
    supplier_id: str = ""
    sku: str = ""
    valid_from: str = ""
    valid_to: str = ""
    currency: str = ""
    price_per_uom: str = ""
    min_qty: str = ""


class CsvReadResult(BaseModel):
    rows: List[CsvRow]
    encoding: str = "utf-8"
    skipped_short_rows: List[int] = Field(
        default_factory=list,
        description="Row numbers dropped for having fewer than 7 fields",
    )


class PriceListCsvReader:
    """
    Splits an uploaded price list into raw rows.

    Quoting is minimal: a double quote toggles "inside quotes" and is itself
    dropped, so commas between quotes stay in the field. There is no escape
    for a literal quote character.
    """

    def detect_encoding(self, file_bytes: bytes) -> str:
        """
        Detect file encoding using chardet.

        Args:
            file_bytes: Raw file bytes

        Returns:
            Detected encoding (utf-8, iso-8859-1, windows-1252, etc.)
        """
        result = chardet.detect(file_bytes)
        encoding = result['encoding'] or 'utf-8'

        encoding_lower = encoding.lower()
        if 'utf-8' in encoding_lower or encoding_lower == 'ascii':
            # utf-8-sig is included so a leading BOM is stripped
            return 'utf-8-sig'
        elif 'iso-8859' in encoding_lower or 'latin' in encoding_lower:
            return 'iso-8859-1'
        elif 'windows' in encoding_lower or 'cp125' in encoding_lower:
            return 'windows-1252'

        return encoding

    def decode(self, file_bytes: bytes) -> Tuple[str, str]:
        encoding = self.detect_encoding(file_bytes)
        try:
            return file_bytes.decode(encoding), encoding
        except (UnicodeDecodeError, LookupError):
            # Fallback to utf-8 with error replacement
            return file_bytes.decode('utf-8', errors='replace'), 'utf-8'

    def split_line(self, line: str) -> List[str]:
        """
        Split one line on commas that are outside double quotes.

        Examples:
            'a,b,c' → ['a', 'b', 'c']
            '1,"SKU,X",2' → ['1', 'SKU,X', '2']
        """
        fields: List[str] = []
        current: List[str] = []
        in_quotes = False

        for char in line:
            if char == '"':
                in_quotes = not in_quotes
            elif char == ',' and not in_quotes:
                fields.append(''.join(current))
                current = []
            else:
                current.append(char)

        fields.append(''.join(current))
        return fields

    def read_text(self, text: str) -> CsvReadResult:
        """
        Turn CSV text into rows.

        Blank lines are skipped but still count towards row numbers, so a
        row number always matches the line a user sees in their editor.
        """
        lines = LINE_BREAK.split(text)
        rows: List[CsvRow] = []
        skipped: List[int] = []

        # Line 1 is the header
        for row_number, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue

            fields = [f.strip() for f in self.split_line(line)]
            if len(fields) < REQUIRED_FIELD_COUNT:
                skipped.append(row_number)
                continue

            rows.append(CsvRow(
                row_number=row_number,
                supplier_id=fields[0],
                sku=fields[1],
                valid_from=fields[2],
                valid_to=fields[3],
                currency=fields[4],
                price_per_uom=fields[5],
                min_qty=fields[6],
            ))

        if skipped:
            logger.info(f"Skipped {len(skipped)} rows with fewer than {REQUIRED_FIELD_COUNT} fields: {skipped}")

        return CsvReadResult(rows=rows, skipped_short_rows=skipped)

    def read(self, file_bytes: bytes) -> CsvReadResult:
        text, encoding = self.decode(file_bytes)
        result = self.read_text(text)
        result.encoding = encoding
        return result
