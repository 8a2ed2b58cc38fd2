# agamotto/utils/file_handlers.py
from pathlib import Path
from fastapi import UploadFile
from ..config import settings

class UploadTooLargeError(ValueError):
    """Upload exceeds MAX_UPLOAD_SIZE"""

def validate_file_type(filename: str) -> bool:
    """
    Validate that the uploaded file has an allowed (CSV) extension
    """
    extension = Path(filename or "").suffix.lower()
    return extension in settings.ALLOWED_EXTENSIONS

async def read_upload_content(upload_file: UploadFile) -> str:
    """
    Read an uploaded CSV file into text
    
    Accepts UTF-8 with or without a byte order mark (spreadsheet exports
    commonly add one, which would otherwise corrupt the first header cell).
    
    Raises:
        UploadTooLargeError: file is larger than MAX_UPLOAD_SIZE
        ValueError: file is not valid UTF-8
    """
    raw = await upload_file.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(raw) > settings.MAX_UPLOAD_SIZE:
        max_mb = settings.MAX_UPLOAD_SIZE / (1024 * 1024)
        raise UploadTooLargeError(f"File too large. Max size: {max_mb:.1f} MB")
    
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValueError(f"File is not valid UTF-8 text: {e}") from e

def export_filename(timestamp_ms: int) -> str:
    """Download name for an export, e.g. agamotto_export_1769500800000.csv"""
    return f"{settings.EXPORT_FILENAME_PREFIX}_{timestamp_ms}.csv"
