# agamotto/schemas/transfer.py
from pydantic import BaseModel
from typing import List

class ValidationResponse(BaseModel):
    """Schema for CSV validation report"""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    session_count: int
    
    class Config:
        from_attributes = True

class FailedRowResponse(BaseModel):
    row_number: int
    error: str
    
    class Config:
        from_attributes = True

class DuplicateRowResponse(BaseModel):
    row_number: int
    timestamp: int
    title: str
    
    class Config:
        from_attributes = True

class ImportResponse(ValidationResponse):
    """Schema for CSV import outcome"""
    success_count: int
    failed_count: int
    failed_rows: List[FailedRowResponse]
    duplicates_skipped: int
    duplicate_rows: List[DuplicateRowResponse]
    tags_created: int
    created_tags: List[str]
    blocked: bool
    tone: str  # success | warning | error
