import csv
import logging
import re
from io import BytesIO, StringIO
from typing import Any, Dict, List, Optional, Tuple

from openpyxl import load_workbook

from storefront.exceptions import SpreadsheetParseError

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}
CSV_CONTENT_TYPES = {"text/csv", "application/csv", "text/plain"}

# (spreadsheet row number, {normalized header: cell value})
ParsedRow = Tuple[int, Dict[str, Any]]


def normalize_header(h: Any) -> str:
    s = ("" if h is None else str(h)).strip().lower()
    s = s.replace("\ufeff", "")
    s = re.sub(r"\s+", "_", s)
    return s


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _rows_to_dicts(rows: List[Tuple[Any, ...]]) -> List[ParsedRow]:
    if not rows:
        return []
    headers = [normalize_header(h) for h in rows[0]]
    out: List[ParsedRow] = []
    for row_number, r in enumerate(rows[1:], start=2):  # header is row 1
        if all(_is_blank(v) for v in r):
            continue
        d: Dict[str, Any] = {}
        for j, h in enumerate(headers):
            if not h:
                continue
            d[h] = r[j] if j < len(r) else None
        out.append((row_number, d))
    return out


def parse_xlsx(raw: bytes) -> List[ParsedRow]:
    """Rows of the first worksheet of an .xlsx workbook."""
    try:
        wb = load_workbook(BytesIO(raw), read_only=True, data_only=True)
    except Exception as e:
        logger.warning("Could not open workbook: %s", e)
        raise SpreadsheetParseError("Failed to read spreadsheet file", original_exception=e) from e
    try:
        ws = wb.worksheets[0] if wb.worksheets else None
        if ws is None:
            return []
        rows = list(ws.iter_rows(values_only=True))
    finally:
        wb.close()
    return _rows_to_dicts(rows)


def parse_csv(raw: bytes) -> List[ParsedRow]:
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning("CSV upload is not UTF-8 (byte offset %d).", e.start)
        raise SpreadsheetParseError(
            "CSV file must be UTF-8 encoded; re-save it as 'CSV UTF-8' or upload .xlsx",
            original_exception=e,
        ) from e

    sample = text[:2048]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=[",", "\t", ";"])
        delim = dialect.delimiter
    except csv.Error:
        delim = ","  # default

    try:
        rows = [tuple(r) for r in csv.reader(StringIO(text), delimiter=delim)]
    except csv.Error as e:
        raise SpreadsheetParseError("Failed to read CSV file", original_exception=e) from e
    return _rows_to_dicts(rows)


def parse_spreadsheet(raw: bytes, filename: Optional[str] = None, content_type: Optional[str] = None) -> List[ParsedRow]:
    """
    Decode an uploaded spreadsheet into (row_number, row_dict) pairs.
    Supports .xlsx (first sheet only) and .csv.
    """
    if not raw:
        raise SpreadsheetParseError("Uploaded file is empty")

    name = (filename or "").lower()
    if name.endswith(".csv") or (content_type in CSV_CONTENT_TYPES and not name.endswith(".xlsx")):
        rows = parse_csv(raw)
        file_type = "csv"
    else:
        rows = parse_xlsx(raw)
        file_type = "xlsx"
    logger.info("Parsed %d data rows from %s upload '%s'.", len(rows), file_type, filename or "<unnamed>")
    return rows
