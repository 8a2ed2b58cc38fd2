"""Test doubles and builders shared across test modules."""

import copy
from datetime import timezone
from typing import Any, Dict, List, Optional

from agamotto.models.session import SessionState
from agamotto.services.errors import ActiveSessionConflictError, StoreWriteError
from agamotto.services.record_store import RecordStore
from agamotto.services.records import SessionRecord, TagRecord

UTC = timezone.utc

HEADER = "Date,Time,Title,Duration (seconds),Rating,Comment,Tag,State"


class FakeRecordStore(RecordStore):
    """In-memory RecordStore with copy-on-read/write semantics."""

    def __init__(self):
        self.sessions: Dict[str, SessionRecord] = {}
        self.tags: Dict[str, TagRecord] = {}
        self.config: Dict[str, Any] = {}
        self.failing_titles: set = set()
        self.session_writes = 0
        self.tag_writes = 0

    async def get_all_sessions(self) -> List[SessionRecord]:
        return [copy.deepcopy(s) for s in self.sessions.values()]

    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        session = self.sessions.get(session_id)
        return copy.deepcopy(session) if session else None

    async def get_sessions_by_state(self, state: SessionState) -> List[SessionRecord]:
        return [copy.deepcopy(s) for s in self.sessions.values() if s.state == state]

    async def put_session(self, session: SessionRecord) -> None:
        if session.title in self.failing_titles:
            raise StoreWriteError(f"Write rejected for '{session.title}'")
        if session.is_live and any(
            s.is_live and s.id != session.id for s in self.sessions.values()
        ):
            raise ActiveSessionConflictError()
        self.session_writes += 1
        self.sessions[session.id] = copy.deepcopy(session)

    async def get_tag(self, name: str) -> Optional[TagRecord]:
        tag = self.tags.get(name)
        return copy.deepcopy(tag) if tag else None

    async def put_tag(self, tag: TagRecord) -> None:
        if any(t.color == tag.color and t.name != tag.name for t in self.tags.values()):
            raise StoreWriteError(f"Color {tag.color} already in use")
        self.tag_writes += 1
        self.tags[tag.name] = copy.deepcopy(tag)

    async def get_all_tags(self) -> List[TagRecord]:
        tags = [copy.deepcopy(t) for t in self.tags.values()]
        tags.sort(key=lambda t: t.date_last_used, reverse=True)
        return tags

    async def delete_tag(self, name: str) -> bool:
        return self.tags.pop(name, None) is not None

    async def get_config(self, key: str) -> Any:
        return self.config.get(key)

    async def put_config(self, key: str, value: Any) -> None:
        self.config[key] = value

    async def get_all_config(self) -> Dict[str, Any]:
        return dict(self.config)


def make_tag(name: str, color: str, used: int = 0) -> TagRecord:
    return TagRecord(name=name, color=color, date_created=used, date_last_used=used)


def make_session(session_id: str, timestamp: int, duration: int = 60_000,
                 state: SessionState = SessionState.COMPLETED,
                 tag: Optional[TagRecord] = None, title: str = "Session") -> SessionRecord:
    return SessionRecord(
        id=session_id,
        title=title,
        duration=duration,
        rating=3,
        comment="",
        timestamp=timestamp,
        state=state,
        tag=tag,
    )


def csv_text(*rows: str) -> str:
    return "\n".join((HEADER,) + rows)


