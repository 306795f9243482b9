"""Logging setup for the ingestion pipeline.

Console output always, plus a file handler when ``log_file`` is set.
Raw model content and exception detail are logged (model content at
DEBUG) and never returned to callers, so this log is where failed
extractions are diagnosed.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from src.config.settings import Settings


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every model request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def _configured(handler: logging.Handler, level: int, format_string: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """Configure the root logger.
    
    Existing root handlers are replaced, so calling this again (e.g. from
    a test) does not duplicate output.
    
    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional log file; parent directories are created
        format_string: Optional record format (defaults to LOG_FORMAT)
    
    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    format_string = format_string or LOG_FORMAT
    
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_configured(logging.StreamHandler(sys.stdout), numeric_level, format_string))
    
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        root_logger.addHandler(_configured(file_handler, numeric_level, format_string))
    
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
    
    return root_logger


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Apply ``log_level`` and ``log_file`` from settings.
    
    Reads a fresh Settings instance by default so the cached global is
    not created before .env files have been loaded.
    """
    settings = settings or Settings()
    return setup_logging(level=settings.log_level, log_file=settings.log_file)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger (typically ``get_logger(__name__)``)."""
    return logging.getLogger(name)


# Initialize logging on module import (LOG_LEVEL / LOG_FILE)
configure_logging()
