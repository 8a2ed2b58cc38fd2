# agamotto/api/transfer.py
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.responses import Response
import logging
import time
from ..models.session import SessionState
from ..schemas.transfer import ValidationResponse, ImportResponse
from ..services.csv_exporter import export_sessions_to_csv
from ..services.csv_validator import csv_validator
from ..services.record_store import RecordStore
from ..services.session_importer import SessionImporter
from ..services.timestamps import resolve_timezone
from ..config import settings
from ..utils.file_handlers import UploadTooLargeError, validate_file_type, read_upload_content, export_filename
from .dependencies import get_store

logger = logging.getLogger(__name__)

router = APIRouter()

async def _read_csv(file: UploadFile) -> str:
    if not validate_file_type(file.filename):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type. Allowed: {settings.ALLOWED_EXTENSIONS}"
        )
    try:
        return await read_upload_content(file)
    except UploadTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/validate", response_model=ValidationResponse)
async def validate_csv(file: UploadFile = File(..., description="Session CSV file")):
    """
    Validate a CSV file without importing it
    Never touches storage
    """
    content = await _read_csv(file)
    return csv_validator.validate(content, resolve_timezone())

@router.post("/import",
             response_model=ImportResponse,
             summary="Import Sessions From CSV",
             description="""
             Import sessions from a CSV export.
             
             **CSV Format**: `Date,Time,Title,Duration (seconds),Rating,Comment,Tag,State`
             - Date `DD/MM/YYYY`, Time `HH:MM:SS`
             - State must be `completed`, `aborted` or `not_started`
             
             **Behavior**:
             - Invalid files are rejected as a whole, nothing is written
             - Missing tags are created with the next free palette color
             - If the tag limit would be exceeded, nothing is imported
             - Rows whose timestamp already exists are skipped (existing data wins)
             - A failed row write is reported and the remaining rows continue
             
             The response always summarizes the outcome; `tone` tells the UI
             whether to show it as success, warning or error.
             """)
async def import_csv(
    file: UploadFile = File(..., description="Session CSV file"),
    store: RecordStore = Depends(get_store)
):
    """Import sessions from CSV"""
    content = await _read_csv(file)
    logger.info(f"[CSV Import] Received {file.filename} ({len(content)} chars)")
    
    importer = SessionImporter(store, tz=resolve_timezone())
    outcome = await importer.import_csv(content)
    return ImportResponse.model_validate(outcome)

@router.get("/export", summary="Export Completed Sessions As CSV")
async def export_csv(store: RecordStore = Depends(get_store)):
    """
    Export all completed sessions in the import format
    """
    sessions = await store.get_sessions_by_state(SessionState.COMPLETED)
    content = export_sessions_to_csv(sessions, resolve_timezone())
    
    filename = export_filename(int(time.time() * 1000))
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
