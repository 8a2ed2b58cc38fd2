# agamotto/schemas/config.py
from pydantic import BaseModel
from typing import Any, Dict

class ConfigValue(BaseModel):
    """Schema for a single config entry"""
    key: str
    value: Any = None

class ConfigUpdate(BaseModel):
    value: Any = None

class ConfigListResponse(BaseModel):
    config: Dict[str, Any]
