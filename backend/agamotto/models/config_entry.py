# agamotto/models/config_entry.py
from sqlalchemy import Column, String, JSON
from ..database import Base

class ConfigEntry(Base):
    """
    Key/value application state (pause time, default stopgap, ...)
    """
    __tablename__ = "config"
    
    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=True)
    
    def __repr__(self):
        return f"<ConfigEntry {self.key}>"
