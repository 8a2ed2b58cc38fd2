"""
Record Store

Persistent keyed storage for sessions, tags and config entries. The core
(importer, reconciler, lifecycle helpers) only talks to the RecordStore
interface; SQLRecordStore is the SQLAlchemy-backed implementation used by
the API.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from ..models.config_entry import ConfigEntry
from ..models.session import LIVE_STATES, Session as SessionModel, SessionState
from ..models.tag import Tag as TagModel
from .errors import ActiveSessionConflictError, StoreWriteError
from .records import SessionRecord, TagRecord
from .tag_palette import DEFAULT_TAG_TIMESTAMP, DEFAULT_TAGS

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """
    Async record store interface.

    Every call is a suspension point for the caller. Implementations must
    give read-after-write consistency within one store handle.
    """

    # Sessions

    @abstractmethod
    async def get_all_sessions(self) -> List[SessionRecord]:
        ...

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        ...

    @abstractmethod
    async def get_sessions_by_state(self, state: SessionState) -> List[SessionRecord]:
        ...

    @abstractmethod
    async def put_session(self, session: SessionRecord) -> None:
        """
        Create or replace a session.

        Raises:
            ActiveSessionConflictError: session is active/paused while a
                different session already is
            StoreWriteError: any other rejected write
        """
        ...

    async def get_active_session(self) -> Optional[SessionRecord]:
        """The currently active or paused session, if any"""
        for state in LIVE_STATES:
            sessions = await self.get_sessions_by_state(state)
            if sessions:
                return sessions[0]
        return None

    # Tags

    @abstractmethod
    async def get_tag(self, name: str) -> Optional[TagRecord]:
        ...

    @abstractmethod
    async def put_tag(self, tag: TagRecord) -> None:
        ...

    @abstractmethod
    async def get_all_tags(self) -> List[TagRecord]:
        """All tags, most recently used first"""
        ...

    @abstractmethod
    async def delete_tag(self, name: str) -> bool:
        ...

    # Config

    @abstractmethod
    async def get_config(self, key: str) -> Any:
        ...

    @abstractmethod
    async def put_config(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    async def get_all_config(self) -> Dict[str, Any]:
        ...

    # Lifecycle

    async def initialize_default_tags(self) -> int:
        """
        Seed the default tags on first run.

        Returns:
            Number of tags created (0 when any tag already exists)
        """
        if await self.get_all_tags():
            return 0
        for name, color in DEFAULT_TAGS:
            await self.put_tag(TagRecord(
                name=name,
                color=color,
                date_created=DEFAULT_TAG_TIMESTAMP,
                date_last_used=DEFAULT_TAG_TIMESTAMP,
                total_instances=0,
            ))
        logger.info(f"[Record Store] Created {len(DEFAULT_TAGS)} default tags")
        return len(DEFAULT_TAGS)

    def close(self) -> None:
        """Release the underlying connection"""


def _tag_from_model(model: TagModel) -> TagRecord:
    return TagRecord(
        name=model.name,
        color=model.color,
        date_created=model.date_created,
        date_last_used=model.date_last_used,
        total_instances=model.total_instances,
    )


def _session_from_model(model: SessionModel) -> SessionRecord:
    return SessionRecord(
        id=model.id,
        title=model.title,
        duration=model.duration,
        rating=model.rating,
        comment=model.comment,
        timestamp=model.timestamp,
        state=SessionState(model.state),
        tag=TagRecord.from_dict(model.tag) if model.tag else None,
    )


class SQLRecordStore(RecordStore):
    """RecordStore on top of a SQLAlchemy ORM session"""

    def __init__(self, db: DBSession):
        self.db = db

    async def get_all_sessions(self) -> List[SessionRecord]:
        models = self.db.query(SessionModel).order_by(SessionModel.timestamp).all()
        return [_session_from_model(m) for m in models]

    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        model = self.db.query(SessionModel).filter(SessionModel.id == session_id).first()
        return _session_from_model(model) if model else None

    async def get_sessions_by_state(self, state: SessionState) -> List[SessionRecord]:
        models = self.db.query(SessionModel).filter(
            SessionModel.state == state
        ).order_by(SessionModel.timestamp).all()
        return [_session_from_model(m) for m in models]

    async def put_session(self, session: SessionRecord) -> None:
        if session.is_live:
            conflict = self.db.query(SessionModel).filter(
                SessionModel.state.in_(LIVE_STATES),
                SessionModel.id != session.id
            ).first()
            if conflict:
                raise ActiveSessionConflictError()

        try:
            self.db.merge(SessionModel(
                id=session.id,
                title=session.title,
                duration=session.duration,
                rating=session.rating,
                comment=session.comment,
                timestamp=session.timestamp,
                state=session.state,
                tag=session.tag.to_dict() if session.tag else None,
            ))
            self.db.commit()
        except (SQLAlchemyError, OverflowError) as e:
            self.db.rollback()
            logger.error(f"[Record Store] Failed to save session {session.id}: {e}")
            raise StoreWriteError(f"Failed to save session: {e}") from e

    async def get_tag(self, name: str) -> Optional[TagRecord]:
        model = self.db.query(TagModel).filter(TagModel.name == name).first()
        return _tag_from_model(model) if model else None

    async def put_tag(self, tag: TagRecord) -> None:
        try:
            self.db.merge(TagModel(
                name=tag.name,
                color=tag.color,
                date_created=tag.date_created,
                date_last_used=tag.date_last_used,
                total_instances=tag.total_instances,
            ))
            self.db.commit()
        except (SQLAlchemyError, OverflowError) as e:
            self.db.rollback()
            logger.error(f"[Record Store] Failed to save tag '{tag.name}': {e}")
            raise StoreWriteError(f"Failed to save tag: {e}") from e

    async def get_all_tags(self) -> List[TagRecord]:
        models = self.db.query(TagModel).order_by(TagModel.date_last_used.desc()).all()
        return [_tag_from_model(m) for m in models]

    async def delete_tag(self, name: str) -> bool:
        model = self.db.query(TagModel).filter(TagModel.name == name).first()
        if not model:
            return False
        self.db.delete(model)
        self.db.commit()
        return True

    async def get_config(self, key: str) -> Any:
        entry = self.db.query(ConfigEntry).filter(ConfigEntry.key == key).first()
        return entry.value if entry else None

    async def put_config(self, key: str, value: Any) -> None:
        try:
            self.db.merge(ConfigEntry(key=key, value=value))
            self.db.commit()
        except (SQLAlchemyError, OverflowError) as e:
            self.db.rollback()
            raise StoreWriteError(f"Failed to save config '{key}': {e}") from e

    async def get_all_config(self) -> Dict[str, Any]:
        return {entry.key: entry.value for entry in self.db.query(ConfigEntry).all()}

    def close(self) -> None:
        self.db.close()
