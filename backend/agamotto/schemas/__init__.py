# agamotto/schemas/__init__.py
from .session import SessionUpdate, SessionResponse, SessionListResponse
from .tag import TagCreate, TagResponse, TagListResponse, AvailableColorsResponse
from .transfer import ValidationResponse, ImportResponse
from .statistics import TagReportResponse
from .config import ConfigValue, ConfigUpdate, ConfigListResponse

__all__ = [
    "SessionUpdate",
    "SessionResponse",
    "SessionListResponse",
    "TagCreate",
    "TagResponse",
    "TagListResponse",
    "AvailableColorsResponse",
    "ValidationResponse",
    "ImportResponse",
    "TagReportResponse",
    "ConfigValue",
    "ConfigUpdate",
    "ConfigListResponse",
]
