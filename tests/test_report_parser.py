"""Tests for report file parsing."""

from unittest.mock import MagicMock, patch

import openpyxl
import pytest

from src.shared.errors import ReportParseError
from src.shared.report_parser import extract_pdf_text, normalize_whitespace, parse_report


def _write_xlsx(path, rows):
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    workbook.save(path)


class TestParseReport:

    def test_xlsx_headers_and_rows(self, tmp_path, sample_report_rows):
        path = tmp_path / "Automation dispatch.xlsx"
        _write_xlsx(path, sample_report_rows)

        report = parse_report(path)

        assert report.headers == sample_report_rows[0]
        assert report.row_count == 2
        assert report.rows[0][0] == 'INC-001'
        assert report.source == str(path)

    def test_numeric_cells_become_strings(self, tmp_path):
        path = tmp_path / "numbers.xlsx"
        _write_xlsx(path, [['Incident ID', 'Latitude'], [101, -26.5]])
        report = parse_report(path)
        assert report.rows == [['101', '-26.5']]

    def test_blank_rows_are_dropped(self, tmp_path):
        path = tmp_path / "gaps.xlsx"
        _write_xlsx(path, [[None, None], ['Incident ID', 'Site'], [None, None], ['INC-1', 'A']])
        report = parse_report(path)
        assert report.headers == ['Incident ID', 'Site']
        assert report.rows == [['INC-1', 'A']]

    def test_csv_with_bom(self, tmp_path):
        path = tmp_path / "report.csv"
        path.write_bytes('\ufeffIncident ID,Site\nINC-1,BDFD_Boeing\n'.encode('utf-8'))
        report = parse_report(path)
        assert report.headers == ['Incident ID', 'Site']
        assert report.as_dicts() == [{'Incident ID': 'INC-1', 'Site': 'BDFD_Boeing'}]

    def test_column_pads_short_rows(self, tmp_path):
        path = tmp_path / "short.csv"
        path.write_text('A,B\n1\n2,3\n', encoding='utf-8')
        assert parse_report(path).column(1) == ['', '3']

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReportParseError, match="File not found"):
            parse_report(tmp_path / "absent.xlsx")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text('', encoding='utf-8')
        with pytest.raises(ReportParseError, match="empty"):
            parse_report(path)

    @pytest.mark.parametrize("name", ["legacy.xls", "report.txt", "noextension"])
    def test_unsupported_format(self, tmp_path, name):
        path = tmp_path / name
        path.write_bytes(b'data')
        with pytest.raises(ReportParseError, match="Unsupported file format"):
            parse_report(path)


class TestExtractPdfText:

    def test_joins_pages_and_normalizes_whitespace(self, tmp_path):
        path = tmp_path / "incident.pdf"
        path.write_bytes(b'%PDF-1.4')
        pages = [MagicMock(), MagicMock()]
        pages[0].extract_text.return_value = "Incident  Report\nSite: BDFD_Boeing"
        pages[1].extract_text.return_value = None
        pdf = MagicMock()
        pdf.pages = pages
        pdf.__enter__.return_value = pdf

        with patch('src.shared.report_parser.pdfplumber.open', return_value=pdf):
            result = extract_pdf_text(path)

        assert result.text == "Incident Report Site: BDFD_Boeing"
        assert result.pages == 2
        assert result.page_texts[1] == ""

    def test_rejects_non_pdf(self, tmp_path):
        path = tmp_path / "report.xlsx"
        path.write_bytes(b'PK')
        with pytest.raises(ReportParseError):
            extract_pdf_text(path)

    def test_missing_pdf(self, tmp_path):
        with pytest.raises(ReportParseError, match="File not found"):
            extract_pdf_text(tmp_path / "absent.pdf")


class TestNormalizeWhitespace:

    def test_collapses_runs(self):
        assert normalize_whitespace("  a \n\t b  ") == "a b"

    def test_none_is_empty(self):
        assert normalize_whitespace(None) == ""
