"""
Date/time conversion for the CSV wire format.

The file carries DD/MM/YYYY and HH:MM:SS with no zone. They are
interpreted in settings.CSV_TIMEZONE, or in the local timezone of the
running process when that is unset. Import and export must run with the
same setting for timestamps to survive a round trip between machines.
"""

import re
from datetime import datetime, tzinfo
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import settings
from .errors import TimestampParseError

_DIGITS = re.compile(r'^[0-9]+$')

_TIME_PATTERN = re.compile(
    r'^([0-9]{1,2}):([0-9]{1,2})(?::([0-9]{1,2}))?\s*([AaPp][Mm])?$'
)


def resolve_timezone(name: Optional[str] = None) -> Optional[tzinfo]:
    """
    Zone used for wire-format dates.
    
    Returns None for "local time of this process".
    """
    name = name if name is not None else settings.CSV_TIMEZONE
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name}") from e


def parse_time(time_str: str) -> Tuple[int, int, int]:
    """Parse HH:MM[:SS] with optional AM/PM into (hours, minutes, seconds)"""
    match = _TIME_PATTERN.match(time_str.strip())
    if not match:
        raise TimestampParseError(f"Invalid time format: {time_str}")
    
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3)) if match.group(3) else 0
    meridiem = match.group(4)
    
    if meridiem:
        if not 1 <= hours <= 12:
            raise TimestampParseError(f"Invalid time format: {time_str}")
        hours = hours % 12 + (12 if meridiem.lower() == 'pm' else 0)
    
    if hours > 23 or minutes > 59 or seconds > 59:
        raise TimestampParseError(f"Invalid time format: {time_str}")
    
    return hours, minutes, seconds


def parse_timestamp(date_str: str, time_str: str, tz: Optional[tzinfo] = None) -> int:
    """
    Convert DD/MM/YYYY + HH:MM:SS into Unix epoch milliseconds.
    
    Args:
        date_str: Day/month/year, e.g. "27/01/2026"
        time_str: 24-hour time, e.g. "14:30:00"
        tz: Zone to interpret the wall-clock time in (None = local)
        
    Raises:
        TimestampParseError: malformed date, malformed time, or a date that
            does not exist in the calendar (31/02/2026)
    """
    date_parts = date_str.strip().split('/')
    if len(date_parts) != 3:
        raise TimestampParseError(f"Invalid date format. Expected DD/MM/YYYY, got: {date_str}")
    
    if not all(_DIGITS.match(part.strip()) for part in date_parts):
        raise TimestampParseError(f"Invalid date values in: {date_str}")
    
    day, month, year = (int(part) for part in date_parts)
    hours, minutes, seconds = parse_time(time_str)
    
    try:
        moment = datetime(year, month, day, hours, minutes, seconds, tzinfo=tz)
    except ValueError as e:
        raise TimestampParseError(f"Cannot create valid date from: {date_str} {time_str}") from e
    
    # Naive datetimes resolve against the process timezone
    return int(moment.timestamp()) * 1000


def format_timestamp(timestamp: int, tz: Optional[tzinfo] = None) -> Tuple[str, str]:
    """Epoch milliseconds to ("DD/MM/YYYY", "HH:MM:SS")"""
    if tz is None:
        moment = datetime.fromtimestamp(timestamp / 1000)
    else:
        moment = datetime.fromtimestamp(timestamp / 1000, tz)
    return moment.strftime('%d/%m/%Y'), moment.strftime('%H:%M:%S')


def day_key(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    """Calendar day (YYYY-MM-DD) of an epoch-ms timestamp"""
    if tz is None:
        moment = datetime.fromtimestamp(timestamp / 1000)
    else:
        moment = datetime.fromtimestamp(timestamp / 1000, tz)
    return moment.strftime('%Y-%m-%d')
