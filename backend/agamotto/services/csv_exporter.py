"""
CSV Exporter

Writes sessions in the interchange format read by the importer. The header
line is plain; every data cell is quote-wrapped regardless of content.
"""

import logging
from datetime import tzinfo
from typing import Iterable, List, Optional

from .csv_parser import quote_cell
from .csv_validator import EXPECTED_HEADERS
from .records import SessionRecord
from .timestamps import format_timestamp

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """Render integral floats without a trailing .0"""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def session_to_row(session: SessionRecord, tz: Optional[tzinfo] = None) -> List[str]:
    date, time = format_timestamp(session.timestamp, tz)
    return [
        date,
        time,
        session.title,
        str(session.duration // 1000),
        format_number(session.rating),
        session.comment,
        session.tag.name if session.tag else "",
        session.state.value,
    ]


def export_sessions_to_csv(sessions: Iterable[SessionRecord], tz: Optional[tzinfo] = None) -> str:
    """
    Serialize sessions to CSV text.
    
    Args:
        sessions: Sessions to export, written in the given order
        tz: Zone for the Date/Time columns (None = local)
        
    Returns:
        CSV text, header only when there are no sessions
    """
    lines = [",".join(EXPECTED_HEADERS)]
    for session in sessions:
        lines.append(",".join(quote_cell(cell) for cell in session_to_row(session, tz)))
    
    logger.info(f"[CSV Export] Exported {len(lines) - 1} sessions")
    return "\n".join(lines)
