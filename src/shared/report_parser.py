"""Parsing of downloaded report files.

Spreadsheets (openpyxl) and CSV files become a header row plus data rows;
PDF reports (pdfplumber) become whitespace-normalized text.
"""

import csv
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import openpyxl
import pdfplumber

from src.shared.errors import ReportParseError

__all__ = [
    'EXCEL_EXTENSIONS',
    'ParsedReport',
    'PdfText',
    'extract_pdf_text',
    'normalize_whitespace',
    'parse_report',
]

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = frozenset({'.xlsx', '.xlsm'})


@dataclass
class ParsedReport:
    """Header row and data rows of a tabular report."""

    headers: List[str]
    rows: List[List[str]]
    source: str = ""

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def column(self, index: int) -> List[str]:
        """Values of one column; short rows yield ''."""
        return [row[index] if index < len(row) else "" for row in self.rows]

    def as_dicts(self) -> List[Dict[str, str]]:
        return [dict(zip(self.headers, row)) for row in self.rows]


@dataclass
class PdfText:
    text: str
    pages: int
    source: str = ""
    page_texts: List[str] = field(default_factory=list)


def _cell_to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _split_rows(raw_rows: List[List[Any]], path: Path) -> ParsedReport:
    """First non-empty row is the header; fully blank rows are dropped."""
    rows = [[_cell_to_str(cell) for cell in row] for row in raw_rows]
    rows = [row for row in rows if any(row)]
    if not rows:
        raise ReportParseError(f"Report file appears to be empty: {path}")

    headers, data = rows[0], rows[1:]
    logger.info(f"Parsed {path.name}: {len(headers)} columns, {len(data)} data rows")
    return ParsedReport(headers=headers, rows=data, source=str(path))


def _read_excel(path: Path) -> ParsedReport:
    workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        raw_rows = [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
    return _split_rows(raw_rows, path)


def _read_csv(path: Path) -> ParsedReport:
    # utf-8-sig drops the BOM some exports start with
    with open(path, 'r', encoding='utf-8-sig', newline='') as f:
        raw_rows = list(csv.reader(f))
    return _split_rows(raw_rows, path)


def parse_report(path: Union[str, Path]) -> ParsedReport:
    """Parse a downloaded .xlsx or .csv report (first worksheet for spreadsheets).

    Raises:
        ReportParseError: If the file is missing, empty or of an unsupported format
    """
    path = Path(path)
    if not path.exists():
        raise ReportParseError(f"File not found: {path}")

    extension = path.suffix.lower()
    if extension in EXCEL_EXTENSIONS:
        return _read_excel(path)
    if extension == '.csv':
        return _read_csv(path)
    raise ReportParseError(f"Unsupported file format: {extension or '(none)'}")


def normalize_whitespace(text: str) -> str:
    return re.sub(r'\s+', ' ', text or '').strip()


def extract_pdf_text(path: Union[str, Path]) -> PdfText:
    """Extract text from every page of a PDF report.

    Raises:
        ReportParseError: If the file is missing or not a PDF
    """
    path = Path(path)
    if not path.exists():
        raise ReportParseError(f"File not found: {path}")
    if path.suffix.lower() != '.pdf':
        raise ReportParseError(f"Unsupported file format: {path.suffix or '(none)'}")

    page_texts = []
    with pdfplumber.open(path) as pdf:
        for page in pdf.pages:
            page_texts.append(page.extract_text() or "")

    text = normalize_whitespace(" ".join(page_texts))
    logger.info(f"Extracted {len(text)} characters from {len(page_texts)} PDF page(s) of {path.name}")
    return PdfText(text=text, pages=len(page_texts), source=str(path), page_texts=page_texts)
