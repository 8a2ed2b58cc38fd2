"""
Session lifecycle: persisting stopwatch sessions and keeping tag usage
counters in step with completions.
"""

import logging
import time

from ..models.session import SessionState
from .record_store import RecordStore
from .records import SessionRecord

logger = logging.getLogger(__name__)


async def save_session(store: RecordStore, session: SessionRecord) -> SessionRecord:
    """
    Persist a session.
    
    When the session transitions into "completed" and carries a tag, the
    stored tag's total_instances is incremented and date_last_used set to
    now. The session's embedded tag snapshot is stored as given; snapshots
    of other sessions are never rewritten.
    
    Raises:
        ActiveSessionConflictError: another session is active or paused
        StoreWriteError: the store rejected the write
    """
    previous = await store.get_session(session.id)
    await store.put_session(session)
    
    completed_now = (
        session.state == SessionState.COMPLETED
        and (previous is None or previous.state != SessionState.COMPLETED)
    )
    if completed_now and session.tag is not None:
        await record_tag_usage(store, session.tag.name)
    
    return session


async def record_tag_usage(store: RecordStore, tag_name: str) -> None:
    """Bump the live tag's usage counters (no-op if it was deleted)"""
    tag = await store.get_tag(tag_name)
    if tag is None:
        logger.warning(f"[Sessions] Completed session references missing tag '{tag_name}'")
        return
    
    tag.total_instances += 1
    tag.date_last_used = int(time.time() * 1000)
    await store.put_tag(tag)
