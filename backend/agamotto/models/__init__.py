# agamotto/models/__init__.py
from .session import Session, SessionState
from .tag import Tag
from .config_entry import ConfigEntry

__all__ = [
    "Session",
    "SessionState",
    "Tag",
    "ConfigEntry",
]
