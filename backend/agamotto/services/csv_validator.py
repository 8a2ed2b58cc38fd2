"""
CSV Validator

Checks header shape and per-row field constraints of a session CSV file.
Produces a report; never touches storage.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any, Dict, List, Optional

from ..models.session import LIVE_STATES, SessionState
from .csv_parser import parse_csv
from .errors import TimestampParseError
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)

# Fixed column layout of the interchange format
EXPECTED_HEADERS = [
    "Date",
    "Time",
    "Title",
    "Duration (seconds)",
    "Rating",
    "Comment",
    "Tag",
    "State",
]

VALID_STATES = [state.value for state in SessionState]

# Only one session may be active/paused at a time, so those never import
IMPORTABLE_STATES = [state.value for state in SessionState if state not in LIVE_STATES]

# Durations are stored as signed 64-bit milliseconds
MAX_DURATION_MS = 2 ** 63 - 1


@dataclass
class ValidationReport:
    """Outcome of validating one CSV file"""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    session_count: int = 0  # Data rows seen, valid or not

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "session_count": self.session_count,
        }


def parse_number(value: str) -> Optional[float]:
    """Finite float from a cell, or None"""
    try:
        number = float(value.strip())
    except (ValueError, AttributeError):
        return None
    return number if math.isfinite(number) else None


class CSVValidator:
    """
    Validates session CSV content.

    Header problems short-circuit; row problems are accumulated across
    every data row so the user sees all of them at once.
    """

    def validate(self, content: str, tz: Optional[tzinfo] = None) -> ValidationReport:
        """
        Validate CSV content.

        Args:
            content: Raw CSV text
            tz: Zone for Date/Time cells (None = local)

        Returns:
            ValidationReport; is_valid is True only when no errors were found
        """
        if not content or not content.strip():
            return ValidationReport(is_valid=False, errors=["CSV file is empty"])

        rows = parse_csv(content)
        if not rows:
            return ValidationReport(is_valid=False, errors=["CSV file contains no data"])

        header_errors = self._check_headers(rows[0])
        if header_errors:
            logger.info(f"[CSV Validator] Header rejected: {rows[0]}")
            return ValidationReport(is_valid=False, errors=header_errors)

        data_rows = rows[1:]
        if not data_rows:
            return ValidationReport(
                is_valid=False,
                errors=["CSV file contains no data rows (only headers)"]
            )

        errors: List[str] = []
        warnings: List[str] = []

        for index, row in enumerate(data_rows):
            row_number = index + 2  # 1-indexed, header is row 1
            errors.extend(self._check_row(row, row_number, tz))

        report = ValidationReport(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            session_count=len(data_rows)
        )

        logger.info(f"[CSV Validator] {len(data_rows)} data rows, {len(errors)} errors")
        return report

    def _check_headers(self, headers: List[str]) -> List[str]:
        errors = []

        if len(headers) != len(EXPECTED_HEADERS):
            errors.append(
                f"Invalid header count. Expected {len(EXPECTED_HEADERS)} columns, got {len(headers)}"
            )

        mismatched = [
            expected for index, expected in enumerate(EXPECTED_HEADERS)
            if index >= len(headers) or headers[index] != expected
        ]
        if mismatched:
            errors.append(
                f"Invalid or missing headers. Expected: {', '.join(EXPECTED_HEADERS)}"
            )

        return errors

    def _check_row(self, row: List[str], row_number: int, tz: Optional[tzinfo]) -> List[str]:
        if len(row) != len(EXPECTED_HEADERS):
            return [f"Row {row_number}: Expected {len(EXPECTED_HEADERS)} columns, got {len(row)}"]

        date, time, title, duration, rating, _comment, _tag, state = row
        errors = []

        if not date.strip():
            errors.append(f"Row {row_number}: Date is required")

        if not time.strip():
            errors.append(f"Row {row_number}: Time is required")

        if not title.strip():
            errors.append(f"Row {row_number}: Title is required")

        duration_value = parse_number(duration)
        if duration_value is None or duration_value < 0:
            errors.append(f"Row {row_number}: Duration must be a non-negative number")
        elif duration_value * 1000 > MAX_DURATION_MS:
            errors.append(f"Row {row_number}: Duration is too large")

        rating_value = parse_number(rating)
        if rating_value is None or not 0 <= rating_value <= 5:
            errors.append(f"Row {row_number}: Rating must be a number between 0 and 5")

        if state not in VALID_STATES:
            errors.append(
                f'Row {row_number}: Invalid state "{state}". Must be one of: {", ".join(VALID_STATES)}'
            )

        try:
            parse_timestamp(date, time, tz)
        except TimestampParseError as e:
            errors.append(f"Row {row_number}: Cannot parse date/time. {e}")

        if state in (SessionState.ACTIVE.value, SessionState.PAUSED.value):
            errors.append(
                f'Row {row_number}: Cannot import "{state}" sessions. The system only allows '
                f'one active/paused session at a time. Change state to "completed" or '
                f'"aborted" before importing.'
            )

        # Tag existence is resolved during import (missing tags are created)
        return errors


# Global instance
csv_validator = CSVValidator()
