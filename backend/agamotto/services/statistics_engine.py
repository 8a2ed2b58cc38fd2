"""
Statistics Engine

Pure functions behind the per-tag analytics view: day grouping,
completeness filtering, descriptive statistics, z-scores, histogram
bucketing and IQR outlier removal. No I/O; empty or degenerate input
yields zeroed results instead of errors.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from ..models.session import SessionState
from .records import SessionRecord
from .timestamps import day_key

logger = logging.getLogger(__name__)

# Mode resolution: durations are bucketed into 30-minute bins
MODE_BUCKET_MS = 30 * 60 * 1000

IQR_MULTIPLIER = 1.5


@dataclass
class DayData:
    """One day's duration for a tag, with the day's overall tracked time"""
    date: str  # YYYY-MM-DD
    duration: int  # ms for the selected tag
    total_day_duration: int  # ms across all tags


@dataclass
class Statistics:
    """Descriptive statistics over a set of durations (milliseconds)"""
    mean: float = 0.0
    median: float = 0.0
    mode: Optional[float] = None  # midpoint of the most frequent 30-minute bucket
    variance: float = 0.0  # sample variance (n - 1)
    standard_deviation: float = 0.0
    min: float = 0.0
    max: float = 0.0
    count: int = 0
    sum: float = 0.0


@dataclass
class ZScorePoint:
    date: str
    duration: int
    z_score: float


@dataclass
class DistributionPoint:
    z_score: float  # bucket midpoint
    frequency: int


@dataclass
class OutlierResult:
    filtered: List[DayData] = field(default_factory=list)
    removed: int = 0
    lower_bound: float = 0.0
    upper_bound: float = 0.0


@dataclass
class DayComparison:
    """How one day ranks against the rest of the selected days"""
    date: str
    duration: int
    z_score: float
    percentile: float
    context_message: str


@dataclass
class TagReport:
    tag_name: str
    days: List[DayData]
    statistics: Statistics
    z_scores: List[ZScorePoint]
    distribution: List[DistributionPoint]
    included_days: int
    excluded_days: int
    outliers_removed: int
    today: Optional[DayComparison] = None


def group_sessions_by_day(sessions: Iterable[SessionRecord],
                          tz: Optional[tzinfo] = None) -> Dict[str, List[SessionRecord]]:
    """Bucket sessions by calendar day of their start timestamp"""
    grouped: Dict[str, List[SessionRecord]] = {}
    for session in sessions:
        grouped.setdefault(day_key(session.timestamp, tz), []).append(session)
    return grouped


def calculate_day_totals(sessions_by_day: Dict[str, List[SessionRecord]]) -> Dict[str, int]:
    """Total duration per day across every tag"""
    return {
        date: sum(session.duration for session in day_sessions)
        for date, day_sessions in sessions_by_day.items()
    }


def completed_day_totals(sessions: Iterable[SessionRecord],
                         tz: Optional[tzinfo] = None) -> Dict[str, int]:
    completed = [s for s in sessions if s.state == SessionState.COMPLETED]
    return calculate_day_totals(group_sessions_by_day(completed, tz))


def get_tag_daily_durations(sessions: Iterable[SessionRecord], tag_name: str,
                            tz: Optional[tzinfo] = None) -> List[DayData]:
    """
    Per-day durations for one tag over completed sessions.

    Only days on which the tag was used are returned, sorted by date.
    """
    completed = [s for s in sessions if s.state == SessionState.COMPLETED]
    sessions_by_day = group_sessions_by_day(completed, tz)
    day_totals = calculate_day_totals(sessions_by_day)

    days = []
    for date in sorted(sessions_by_day):
        tag_duration = sum(
            s.duration for s in sessions_by_day[date]
            if s.tag is not None and s.tag.name == tag_name
        )
        if tag_duration > 0:
            days.append(DayData(date=date, duration=tag_duration,
                                total_day_duration=day_totals[date]))
    return days


def calculate_completeness_percentiles(day_totals: Dict[str, int]) -> Dict[str, float]:
    """Rank-based percentile (0-100] of each day's total tracked time"""
    ranked = sorted(day_totals.items(), key=lambda item: (item[1], item[0]))
    total_days = len(ranked)
    return {
        date: (rank + 1) / total_days * 100
        for rank, (date, _total) in enumerate(ranked)
    }


def filter_days_by_completeness(days: List[DayData], day_totals: Dict[str, int],
                                min_percentile: float) -> List[DayData]:
    """Keep days whose overall tracking percentile is at least min_percentile"""
    if min_percentile == 0:
        return list(days)

    percentiles = calculate_completeness_percentiles(day_totals)
    return [day for day in days if percentiles.get(day.date, 0) >= min_percentile]


def calculate_statistics(durations: Sequence[float]) -> Statistics:
    """Mean, median, bucketed mode, sample variance and friends"""
    if len(durations) == 0:
        return Statistics()

    values = np.asarray(durations, dtype=float)
    count = len(values)
    mean = float(values.mean())

    # First bucket to reach the top frequency wins ties
    buckets = Counter(math.floor(value / MODE_BUCKET_MS) for value in durations)
    top_bucket, top_frequency = buckets.most_common(1)[0]
    mode = top_bucket * MODE_BUCKET_MS + MODE_BUCKET_MS / 2 if top_frequency > 1 else None

    spread = count > 1 and values.min() != values.max()
    variance = float(values.var(ddof=1)) if spread else 0.0

    return Statistics(
        mean=mean,
        median=float(np.median(values)),
        mode=mode,
        variance=variance,
        standard_deviation=math.sqrt(variance),
        min=float(values.min()),
        max=float(values.max()),
        count=count,
        sum=float(values.sum()),
    )


def calculate_z_scores(days: List[DayData], stats: Statistics) -> List[ZScorePoint]:
    """(value - mean) / stdDev per day; all zero when there is no spread"""
    if stats.standard_deviation == 0:
        return [ZScorePoint(day.date, day.duration, 0.0) for day in days]

    return [
        ZScorePoint(day.date, day.duration,
                    (day.duration - stats.mean) / stats.standard_deviation)
        for day in days
    ]


def create_distribution_data(z_scores: List[ZScorePoint],
                             bucket_count: int = 20) -> List[DistributionPoint]:
    """
    Equal-width histogram of z-scores over [min z, max z].

    Identical z-scores collapse into a single bucket. The top edge falls
    into the last bucket.
    """
    if bucket_count < 1:
        raise ValueError("bucket_count must be at least 1")
    if not z_scores:
        return []

    values = [point.z_score for point in z_scores]
    min_z, max_z = min(values), max(values)

    if min_z == max_z:
        return [DistributionPoint(z_score=min_z, frequency=len(values))]

    bucket_size = (max_z - min_z) / bucket_count
    buckets = [
        DistributionPoint(z_score=min_z + i * bucket_size + bucket_size / 2, frequency=0)
        for i in range(bucket_count)
    ]

    for value in values:
        index = min(math.floor((value - min_z) / bucket_size), bucket_count - 1)
        buckets[index].frequency += 1

    return buckets


def calculate_percentile(value: float, all_values: Sequence[float]) -> float:
    """Percentage of all_values that are <= value"""
    if len(all_values) == 0:
        return 0.0
    return sum(1 for v in all_values if v <= value) / len(all_values) * 100


def remove_outliers(days: List[DayData]) -> OutlierResult:
    """
    Drop days outside [Q1 - 1.5 IQR, Q3 + 1.5 IQR].

    Quartiles are read at sorted indices floor(n * 0.25) and floor(n * 0.75).
    Fewer than four days still filters with whatever bounds result.
    """
    if not days:
        return OutlierResult()

    sorted_durations = sorted(day.duration for day in days)
    n = len(sorted_durations)
    q1 = sorted_durations[math.floor(n * 0.25)]
    q3 = sorted_durations[math.floor(n * 0.75)]
    iqr = q3 - q1
    lower = q1 - IQR_MULTIPLIER * iqr
    upper = q3 + IQR_MULTIPLIER * iqr

    filtered = [day for day in days if lower <= day.duration <= upper]
    return OutlierResult(
        filtered=filtered,
        removed=len(days) - len(filtered),
        lower_bound=lower,
        upper_bound=upper,
    )


def percentile_context(percentile: float) -> str:
    if percentile < 25:
        return "Below average for this tag"
    if percentile < 50:
        return "Slightly below median"
    if percentile < 75:
        return "Above median"
    return "Well above average"


def compare_day(date: str, days: List[DayData], stats: Statistics) -> Optional[DayComparison]:
    """Rank one day (usually today) against the selected days"""
    target = next((day for day in days if day.date == date), None)
    if target is None:
        return None

    percentile = calculate_percentile(target.duration, [day.duration for day in days])
    z_score = (
        (target.duration - stats.mean) / stats.standard_deviation
        if stats.standard_deviation > 0 else 0.0
    )
    return DayComparison(
        date=date,
        duration=target.duration,
        z_score=z_score,
        percentile=percentile,
        context_message=percentile_context(percentile),
    )


def build_tag_report(sessions: List[SessionRecord], tag_name: str,
                     min_percentile: float = 0, remove_outliers_enabled: bool = False,
                     bucket_count: int = 20, today: Optional[str] = None,
                     tz: Optional[tzinfo] = None) -> TagReport:
    """
    Full analytics for one tag.

    Args:
        sessions: All stored sessions (only completed ones are used)
        tag_name: Selected tag
        min_percentile: Minimum day completeness percentile (0 = keep all)
        remove_outliers_enabled: Apply IQR trimming after the completeness filter
        bucket_count: Histogram resolution
        today: Day key to compare against the distribution
        tz: Zone for day grouping (None = local)
    """
    all_days = get_tag_daily_durations(sessions, tag_name, tz)
    day_totals = completed_day_totals(sessions, tz)
    days = filter_days_by_completeness(all_days, day_totals, min_percentile)

    outliers_removed = 0
    if remove_outliers_enabled:
        trimmed = remove_outliers(days)
        days, outliers_removed = trimmed.filtered, trimmed.removed

    stats = calculate_statistics([day.duration for day in days])
    z_scores = calculate_z_scores(days, stats)

    logger.info(
        f"[Statistics] Tag '{tag_name}': {len(days)}/{len(all_days)} days, "
        f"{outliers_removed} outliers removed"
    )

    return TagReport(
        tag_name=tag_name,
        days=days,
        statistics=stats,
        z_scores=z_scores,
        distribution=create_distribution_data(z_scores, bucket_count),
        included_days=len(days),
        excluded_days=len(all_days) - len(days),
        outliers_removed=outliers_removed,
        today=compare_day(today, days, stats) if today else None,
    )


def format_duration(ms: float) -> str:
    """Milliseconds as "Xh Ym" (seconds omitted)"""
    total_seconds = int(ms // 1000)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60

    if hours > 0 and minutes > 0:
        return f"{hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h"
    if minutes > 0:
        return f"{minutes}m"
    return "< 1m"


def format_z_score(z_score: float) -> str:
    sign = "+" if z_score >= 0 else ""
    return f"{sign}{z_score:.1f}σ"
