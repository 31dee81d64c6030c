"""Field validation for parsed reports.

Each check returns a ValidationResult; assert_valid() logs the offending
values and raises ReportValidationError so the failure shows up as a test
assertion.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence

from src.shared.constants import VALIDATION
from src.shared.errors import ReportValidationError
from src.shared.report_parser import ParsedReport, normalize_whitespace

__all__ = [
    'DATE_PATTERN',
    'INCIDENT_ID_PATTERN',
    'PROOF_STATUSES',
    'ValidationResult',
    'assert_valid',
    'contains_text',
    'find_column',
    'validate_coordinate_range',
    'validate_dispatch_report',
    'validate_enum_membership',
    'validate_non_blank_unique',
    'validate_required_column',
]

PROOF_STATUSES = frozenset({
    'DISPATCH_CREATED',
    'RESPONDER_DISPATCHED',
    'RESPONDER_ARRIVED',
    'RESPONDER_COMPLETED',
    'OPERATOR_CANCELLED',
})

# PDF content patterns
DATE_PATTERN = re.compile(r'(\d{4}[-/]\d{2}[-/]\d{2}|\d{1,2} \w{3,9} \d{4})')
INCIDENT_ID_PATTERN = re.compile(r'(incident\s*id\s*[:#-]?\s*[A-Za-z0-9\-_/]+)', re.IGNORECASE)


class ValidationResult:
    """Result of a report validation check.

    Attributes:
        is_valid: True if validation passed (no errors)
        errors: List of error messages
        warnings: List of warning messages
    """

    def __init__(self, is_valid: bool, errors: List[str], warnings: List[str]):
        self.is_valid = is_valid
        self.errors = errors
        self.warnings = warnings

    def __repr__(self) -> str:
        return f"ValidationResult(is_valid={self.is_valid}, errors={len(self.errors)}, warnings={len(self.warnings)})"

    @classmethod
    def from_errors(cls, errors: List[str], warnings: Optional[List[str]] = None) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors, warnings=warnings or [])

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult.from_errors(self.errors + other.errors, self.warnings + other.warnings)


def find_column(headers: Sequence[str], *needles: str) -> Optional[int]:
    """Index of the first header containing every needle (case-insensitive), or None."""
    lowered = [needle.lower() for needle in needles]
    for index, header in enumerate(headers):
        name = (header or "").lower()
        if all(needle in name for needle in lowered):
            return index
    return None


def validate_required_column(report: ParsedReport, *needles: str) -> ValidationResult:
    if not report.headers:
        return ValidationResult.from_errors(["Report has an empty header row"])
    if find_column(report.headers, *needles) is None:
        return ValidationResult.from_errors(
            [f"No column matching {' + '.join(needles)!r} in headers {report.headers}"]
        )
    return ValidationResult.from_errors([])


def validate_non_blank_unique(report: ParsedReport, *needles: str) -> ValidationResult:
    """Every value in the matching column is non-blank and unique across rows."""
    result = validate_required_column(report, *needles)
    if not result.is_valid:
        return result

    index = find_column(report.headers, *needles)
    header = report.headers[index]
    errors = []
    seen = {}
    for row_number, value in enumerate(report.column(index), start=2):
        if not value.strip():
            errors.append(f"Row {row_number}: blank {header}")
            continue
        if value in seen:
            errors.append(f"Row {row_number}: duplicate {header} {value!r} (first seen on row {seen[value]})")
        else:
            seen[value] = row_number

    warnings = [] if report.rows else [f"Report has no data rows to check {header}"]
    return ValidationResult.from_errors(errors, warnings)


def validate_coordinate_range(report: ParsedReport, needle: str, minimum: float, maximum: float,
                              allow_blank: bool = True) -> ValidationResult:
    """Values in the matching column parse as floats within [minimum, maximum]."""
    result = validate_required_column(report, needle)
    if not result.is_valid:
        return result

    index = find_column(report.headers, needle)
    header = report.headers[index]
    errors = []
    for row_number, value in enumerate(report.column(index), start=2):
        if not value.strip():
            if not allow_blank:
                errors.append(f"Row {row_number}: blank {header}")
            continue
        try:
            number = float(value)
        except ValueError:
            errors.append(f"Row {row_number}: {header} {value!r} is not a number")
            continue
        if not minimum <= number <= maximum:
            errors.append(f"Row {row_number}: {header} {number} outside [{minimum}, {maximum}]")
    return ValidationResult.from_errors(errors)


def validate_enum_membership(report: ParsedReport, allowed: Iterable[str], *needles: str,
                             allow_blank: bool = True) -> ValidationResult:
    """Values in the matching column belong to allowed (case-insensitive)."""
    result = validate_required_column(report, *needles)
    if not result.is_valid:
        return result

    allowed_upper = {value.upper() for value in allowed}
    index = find_column(report.headers, *needles)
    header = report.headers[index]
    errors = []
    for row_number, value in enumerate(report.column(index), start=2):
        if not value.strip():
            if not allow_blank:
                errors.append(f"Row {row_number}: blank {header}")
            continue
        if value.strip().upper() not in allowed_upper:
            errors.append(f"Row {row_number}: unexpected {header} {value!r}")
    return ValidationResult.from_errors(errors)


def validate_dispatch_report(report: ParsedReport) -> ValidationResult:
    """Checks applied to every downloaded dispatch report; a report with no data rows fails."""
    if report.headers and not report.rows:
        return ValidationResult.from_errors(["Dispatch report has a header row but no data rows"])
    result = validate_non_blank_unique(report, 'incident', 'id')
    result = result.merge(validate_coordinate_range(report, 'lat', VALIDATION.LAT_MIN, VALIDATION.LAT_MAX))
    result = result.merge(validate_coordinate_range(report, 'long', VALIDATION.LON_MIN, VALIDATION.LON_MAX))
    if find_column(report.headers, 'proof', 'status') is not None:
        result = result.merge(validate_enum_membership(report, PROOF_STATUSES, 'proof', 'status'))
    return result


def assert_valid(result: ValidationResult, context: str = "report") -> None:
    """Log errors (up to the configured limit) and raise if the result is invalid.

    Raises:
        ReportValidationError: If result.is_valid is False
    """
    for warning in result.warnings:
        logging.warning(f"{context}: {warning}")

    if result.is_valid:
        return

    for error in result.errors[:VALIDATION.ERROR_LOG_LIMIT]:
        logging.warning(f"{context}: {error}")
    if len(result.errors) > VALIDATION.ERROR_LOG_LIMIT:
        logging.warning(f"... and {len(result.errors) - VALIDATION.ERROR_LOG_LIMIT} more validation errors")

    raise ReportValidationError(
        f"{context} failed validation with {len(result.errors)} error(s): {result.errors[0]}",
        errors=result.errors,
    )


def contains_text(haystack: str, needle: str) -> bool:
    """Case-insensitive containment ignoring whitespace differences."""
    return normalize_whitespace(needle).lower() in normalize_whitespace(haystack).lower()
