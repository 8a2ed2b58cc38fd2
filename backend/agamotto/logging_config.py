"""
Logging configuration for Agamotto Time Tracker

Sets up file-based logging with rotation:
- app.log: General application logs
- transfer.log: CSV import/export and tag reconciliation trail
- error.log: Error logs only (ERROR and above)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict

from .config import settings

# Loggers whose records also go to transfer.log
TRANSFER_LOGGERS = (
    'agamotto.services.session_importer',
    'agamotto.services.tag_reconciler',
    'agamotto.services.csv_validator',
    'agamotto.services.csv_exporter',
    'agamotto.api.transfer',
)

DETAILED_FORMAT = '[%(asctime)s] %(levelname)-8s [%(name)s:%(lineno)d] - %(message)s'

def _rotating_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler

def _apply_component_levels(levels: Dict[str, str]) -> None:
    """Set per-logger levels, e.g. {"agamotto.services.statistics_engine": "WARNING"}"""
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level.upper())

def setup_logging():
    """
    Configure application-wide logging

    Creates three log files under settings.LOG_DIR, each rotating at
    settings.LOG_MAX_BYTES. The agamotto package logs at settings.LOG_LEVEL,
    individual components can be tuned with settings.LOG_COMPONENT_LEVELS.
    Console output shows only WARNING and above.
    """
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers.clear()

    app_log_file = log_dir / "app.log"
    error_log_file = log_dir / "error.log"
    transfer_log_file = log_dir / "transfer.log"

    root_logger.addHandler(_rotating_handler(app_log_file, logging.DEBUG))
    root_logger.addHandler(_rotating_handler(error_log_file, logging.ERROR))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    root_logger.addHandler(console_handler)

    # Import/export trail: one handler shared by the transfer pipeline loggers
    transfer_handler = _rotating_handler(transfer_log_file, logging.DEBUG)
    for name in TRANSFER_LOGGERS:
        component_logger = logging.getLogger(name)
        for handler in list(component_logger.handlers):
            if isinstance(handler, RotatingFileHandler):
                component_logger.removeHandler(handler)
                handler.close()
        component_logger.addHandler(transfer_handler)

    logging.getLogger('agamotto').setLevel(settings.LOG_LEVEL.upper())
    _apply_component_levels(settings.LOG_COMPONENT_LEVELS)

    # Only show SQLAlchemy warnings and errors
    for name in ('sqlalchemy.engine', 'sqlalchemy.pool', 'sqlalchemy.dialects', 'sqlalchemy.orm'):
        logging.getLogger(name).setLevel(logging.WARNING)

    # Import requests are summarized by the importer itself
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"{settings.APP_NAME} - Logging initialized at {settings.LOG_LEVEL.upper()}")
    logger.info(f"Logs: {app_log_file}, {transfer_log_file}, {error_log_file}")

    return logger
