# services/__init__.py
from .csv_validator import CSVValidator, ValidationReport, csv_validator
from .session_importer import ImportOutcome, SessionImporter
from .tag_reconciler import TagReconciler
from .record_store import RecordStore, SQLRecordStore

__all__ = [
    "CSVValidator",
    "ValidationReport",
    "csv_validator",
    "ImportOutcome",
    "SessionImporter",
    "TagReconciler",
    "RecordStore",
    "SQLRecordStore",
]
