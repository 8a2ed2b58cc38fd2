# agamotto/schemas/statistics.py
from pydantic import BaseModel
from typing import List, Optional

class DayDataResponse(BaseModel):
    date: str
    duration: int
    total_day_duration: int
    
    class Config:
        from_attributes = True

class StatisticsResponse(BaseModel):
    """Descriptive statistics, all durations in milliseconds"""
    mean: float
    median: float
    mode: Optional[float] = None
    variance: float
    standard_deviation: float
    min: float
    max: float
    count: int
    sum: float
    
    class Config:
        from_attributes = True

class ZScoreResponse(BaseModel):
    date: str
    duration: int
    z_score: float
    
    class Config:
        from_attributes = True

class DistributionResponse(BaseModel):
    z_score: float
    frequency: int
    
    class Config:
        from_attributes = True

class DayComparisonResponse(BaseModel):
    date: str
    duration: int
    z_score: float
    percentile: float
    context_message: str
    
    class Config:
        from_attributes = True

class TagReportResponse(BaseModel):
    """Schema for per-tag analytics"""
    tag_name: str
    days: List[DayDataResponse]
    statistics: StatisticsResponse
    z_scores: List[ZScoreResponse]
    distribution: List[DistributionResponse]
    included_days: int
    excluded_days: int
    outliers_removed: int
    today: Optional[DayComparisonResponse] = None
    
    class Config:
        from_attributes = True
