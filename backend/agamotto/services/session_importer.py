"""
Session Importer

Orchestrates a CSV import:
1. Validate the file (no storage access for an invalid file)
2. Snapshot existing session timestamps (de-duplication index)
3. Reconcile every referenced tag once (all-or-nothing on the tag limit)
4. Persist each valid, non-duplicate row in file order

Existing data always wins: a row whose timestamp is already stored is
reported as a duplicate and discarded.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any, Dict, List, Optional

from ..models.session import SessionState
from .csv_parser import parse_csv
from .csv_validator import CSVValidator, ValidationReport, csv_validator
from .errors import StoreWriteError, TagCreationError, TagLimitExceededError, TimestampParseError
from .record_store import RecordStore
from .records import SessionRecord, TagRecord
from .tag_reconciler import TagReconciler
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)


@dataclass
class FailedRow:
    row_number: int
    error: str


@dataclass
class DuplicateRow:
    row_number: int
    timestamp: int
    title: str


@dataclass
class ImportOutcome:
    """Summary of one import call"""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    session_count: int = 0
    success_count: int = 0
    failed_rows: List[FailedRow] = field(default_factory=list)
    duplicate_rows: List[DuplicateRow] = field(default_factory=list)
    created_tags: List[str] = field(default_factory=list)
    blocked: bool = False  # Whole import refused (invalid file, tag limit or tag write failure)

    @property
    def failed_count(self) -> int:
        return len(self.failed_rows)

    @property
    def duplicates_skipped(self) -> int:
        return len(self.duplicate_rows)

    @property
    def tags_created(self) -> int:
        return len(self.created_tags)

    @property
    def tone(self) -> str:
        """
        Presentation tone derived from the report shape alone:
        error when nothing could be imported because of errors,
        warning when anything was failed or skipped, success otherwise.
        """
        if self.blocked or (self.errors and self.success_count == 0):
            return "error"
        if self.failed_rows or self.duplicate_rows or self.warnings:
            return "warning"
        return "success"

    @classmethod
    def from_validation(cls, report: ValidationReport) -> "ImportOutcome":
        return cls(
            is_valid=report.is_valid,
            errors=list(report.errors),
            warnings=list(report.warnings),
            session_count=report.session_count,
            blocked=not report.is_valid,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "session_count": self.session_count,
            "success_count": self.success_count,
            "failed_count": self.failed_count,
            "failed_rows": [
                {"row_number": r.row_number, "error": r.error} for r in self.failed_rows
            ],
            "duplicates_skipped": self.duplicates_skipped,
            "duplicate_rows": [
                {"row_number": r.row_number, "timestamp": r.timestamp, "title": r.title}
                for r in self.duplicate_rows
            ],
            "tags_created": self.tags_created,
            "created_tags": self.created_tags,
            "blocked": self.blocked,
            "tone": self.tone,
        }


def extract_tag_names(data_rows: List[List[str]]) -> List[str]:
    """Distinct non-empty tag names (trimmed, case-sensitive) in first-appearance order"""
    names: Dict[str, None] = {}
    for row in data_rows:
        if len(row) > 6:
            name = row[6].strip()
            if name:
                names.setdefault(name, None)
    return list(names)


class SessionImporter:
    """Imports session CSV content into a record store"""

    def __init__(self, store: RecordStore, validator: CSVValidator = csv_validator,
                 tz: Optional[tzinfo] = None):
        self.store = store
        self.validator = validator
        self.tz = tz

    async def import_csv(self, content: str) -> ImportOutcome:
        """
        Import sessions from CSV content.

        Rows are processed strictly in file order. A failed row write is
        recorded and the import continues; an invalid file, a tag limit
        violation or a failed tag write stops the whole import before any
        session is written.

        Args:
            content: Raw CSV text

        Returns:
            ImportOutcome with counts and itemized row results
        """
        report = self.validator.validate(content, self.tz)
        if not report.is_valid:
            logger.warning(f"[CSV Import] Validation failed with {len(report.errors)} errors")
            return ImportOutcome.from_validation(report)

        data_rows = parse_csv(content)[1:]

        existing_sessions = await self.store.get_all_sessions()
        known_timestamps = {session.timestamp for session in existing_sessions}
        logger.info(
            f"[CSV Import] Importing {len(data_rows)} rows against "
            f"{len(existing_sessions)} existing sessions"
        )

        outcome = ImportOutcome(
            is_valid=True,
            warnings=list(report.warnings),
            session_count=report.session_count,
        )

        try:
            reconciliation = await TagReconciler(self.store).reconcile(extract_tag_names(data_rows))
        except TagLimitExceededError as e:
            logger.warning(f"[CSV Import] Import aborted: {e}")
            outcome.errors.append(str(e))
            outcome.blocked = True
            return outcome
        except TagCreationError as e:
            logger.error(f"[CSV Import] Import aborted: {e}")
            outcome.errors.append(str(e))
            outcome.created_tags = list(e.created_names)
            outcome.blocked = True
            return outcome

        outcome.created_tags = list(reconciliation.created_names)
        tag_map = reconciliation.tag_map

        for index, row in enumerate(data_rows):
            row_number = index + 2  # 1-indexed + header row
            date, time, title, duration, rating, comment, tag_name, state = row

            # Never write a live session, even if validation was bypassed
            if state in (SessionState.ACTIVE.value, SessionState.PAUSED.value):
                outcome.failed_rows.append(FailedRow(
                    row_number,
                    f'Cannot import "{state}" sessions. System constraint: '
                    f'only one active/paused session allowed at a time.'
                ))
                continue

            try:
                timestamp = parse_timestamp(date, time, self.tz)
            except TimestampParseError as e:
                outcome.failed_rows.append(FailedRow(row_number, str(e)))
                continue

            if timestamp in known_timestamps:
                outcome.duplicate_rows.append(DuplicateRow(row_number, timestamp, title.strip()))
                continue

            tag = await self._resolve_tag(tag_name.strip(), tag_map, row_number, outcome)

            try:
                session = SessionRecord(
                    id=str(uuid.uuid4()),
                    title=title.strip(),
                    duration=int(round(float(duration) * 1000)),
                    rating=float(rating),
                    comment=comment.strip(),
                    timestamp=timestamp,
                    state=SessionState(state),
                    tag=tag.snapshot() if tag else None,
                )
            except (ValueError, OverflowError) as e:
                outcome.failed_rows.append(FailedRow(row_number, f"Invalid row values: {e}"))
                continue

            try:
                await self.store.put_session(session)
            except StoreWriteError as e:
                logger.error(f"[CSV Import] Row {row_number} write failed: {e}")
                outcome.failed_rows.append(FailedRow(row_number, str(e)))
                continue

            known_timestamps.add(timestamp)
            outcome.success_count += 1

        logger.info(
            f"[CSV Import] Done: {outcome.success_count} imported, "
            f"{outcome.failed_count} failed, {outcome.duplicates_skipped} duplicates, "
            f"{outcome.tags_created} tags created"
        )
        return outcome

    async def _resolve_tag(self, name: str, tag_map: Dict[str, TagRecord],
                           row_number: int, outcome: ImportOutcome) -> Optional[TagRecord]:
        if not name:
            return None

        tag = tag_map.get(name)
        if tag is None:
            # Last resort for names that slipped past extraction
            tag = await self.store.get_tag(name)
            if tag is not None:
                tag_map[name] = tag

        if tag is None:
            outcome.warnings.append(
                f'Row {row_number}: Tag "{name}" not found. Session will be imported without tag.'
            )
        return tag
