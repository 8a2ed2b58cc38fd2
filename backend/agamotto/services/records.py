"""
In-memory domain records exchanged between the record store and the core.

The ORM models in agamotto.models are the storage representation; these
dataclasses are what the importer, exporter and statistics engine see.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from ..models.session import SessionState


@dataclass
class TagRecord:
    """A named, uniquely-colored category"""
    name: str
    color: str
    date_created: int  # Unix epoch ms
    date_last_used: int  # Unix epoch ms
    total_instances: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "color": self.color,
            "date_created": self.date_created,
            "date_last_used": self.date_last_used,
            "total_instances": self.total_instances,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TagRecord":
        return cls(
            name=data["name"],
            color=data["color"],
            date_created=int(data.get("date_created", 0)),
            date_last_used=int(data.get("date_last_used", 0)),
            total_instances=int(data.get("total_instances", 0)),
        )

    def snapshot(self) -> "TagRecord":
        """Copy used when embedding this tag into a session"""
        return replace(self)


@dataclass
class SessionRecord:
    """One tracked unit of time"""
    id: str
    title: str
    duration: int  # milliseconds
    rating: float
    comment: str
    timestamp: int  # session start, Unix epoch ms
    state: SessionState
    tag: Optional[TagRecord] = None

    @property
    def is_live(self) -> bool:
        return self.state in (SessionState.ACTIVE, SessionState.PAUSED)
