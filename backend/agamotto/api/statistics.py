# agamotto/api/statistics.py
from fastapi import APIRouter, Depends, Query
from typing import Optional
import time
from ..config import settings
from ..schemas.statistics import TagReportResponse
from ..services.record_store import RecordStore
from ..services.statistics_engine import build_tag_report
from ..services.timestamps import day_key, resolve_timezone
from .dependencies import get_store

router = APIRouter()

@router.get("/{tag_name}", response_model=TagReportResponse)
async def get_tag_statistics(
    tag_name: str,
    min_percentile: float = Query(0, ge=0, le=100, description="Minimum day completeness percentile"),
    remove_outliers: bool = Query(False, description="Drop days outside 1.5 IQR"),
    bucket_count: Optional[int] = Query(None, ge=1, le=200, description="Histogram buckets"),
    store: RecordStore = Depends(get_store)
):
    """
    Per-tag analytics over completed sessions
    
    Includes per-day durations, descriptive statistics, z-scores,
    z-score histogram and how today compares to the selected days.
    """
    tz = resolve_timezone()
    sessions = await store.get_all_sessions()
    
    report = build_tag_report(
        sessions,
        tag_name,
        min_percentile=min_percentile,
        remove_outliers_enabled=remove_outliers,
        bucket_count=bucket_count or settings.DEFAULT_HISTOGRAM_BUCKETS,
        today=day_key(int(time.time() * 1000), tz),
        tz=tz,
    )
    return TagReportResponse.model_validate(report)
