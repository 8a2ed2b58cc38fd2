# agamotto/config.py
from pathlib import Path
from pydantic_settings import BaseSettings
from typing import Dict, List, Optional

class Settings(BaseSettings):
    """Application configuration using Pydantic settings"""
    
    # App Info
    APP_NAME: str = "Agamotto Time Tracker"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    
    # Database
    DATABASE_URL: str = "sqlite:///./agamotto.db"
    
    # Logging
    LOG_DIR: str = str(Path(__file__).parent.parent / "logs")
    LOG_LEVEL: str = "INFO"
    # Per-logger overrides, e.g. {"agamotto.services.statistics_engine": "WARNING"}
    LOG_COMPONENT_LEVELS: Dict[str, str] = {}
    LOG_MAX_BYTES: int = 10 * 1024 * 1024  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    
    # CSV Upload
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5 MB
    ALLOWED_EXTENSIONS: List[str] = [".csv"]
    
    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",  # Vite default
    ]
    
    # Date/Time interpretation for CSV import/export and day grouping.
    # None = local timezone of the running process.
    CSV_TIMEZONE: Optional[str] = None
    
    # Export
    EXPORT_FILENAME_PREFIX: str = "agamotto_export"
    
    # Statistics
    DEFAULT_HISTOGRAM_BUCKETS: int = 20
    
    class Config:
        env_file = ".env"
        case_sensitive = True

# Singleton instance
settings = Settings()
