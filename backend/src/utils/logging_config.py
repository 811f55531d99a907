"""
Structured logging configuration for the eventdash backend.

Provides JSON-formatted logging with file rotation for production environments
and human-readable console logging for development.

Loggers:
- api: HTTP requests, responses, exception handlers
- services: Business logic (staff assignments, sponsors, budget ledger, agenda)
- db: Database operations and engine errors
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional


LOGGER_NAMESPACE = "eventdash"
LOGGER_NAMES = ("api", "services", "db")


class JSONFormatter(logging.Formatter):
    """
    Formatter that renders each record as a single JSON object.

    Each log record includes timestamp (ISO 8601, UTC), level, logger name,
    message, module, function and line number. Exception text and any
    ``extra_fields`` attached to the record are merged in.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # logger.info("msg", extra={"extra_fields": {...}})
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output in development.

    Example: [2026-03-02 10:30:45] INFO - eventdash.services - Created sponsor spn_01hgw...
    """

    def __init__(self):
        super().__init__(
            fmt="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def _get_log_level() -> int:
    """
    Read the log level from EVENTDASH_LOG_LEVEL (default INFO).

    Unknown level names fall back to INFO.
    """
    level_str = os.environ.get("EVENTDASH_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def _get_log_dir() -> Path:
    """Return (and create) the directory named by EVENTDASH_LOG_DIR, default ./logs."""
    log_dir = Path(os.environ.get("EVENTDASH_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _is_production() -> bool:
    return os.environ.get("EVENTDASH_ENV", "development").lower() == "production"


def configure_logging() -> Dict[str, logging.Logger]:
    """
    Configure the named eventdash loggers.

    Behavior:
    - Production (EVENTDASH_ENV=production):
      * JSON logs written to ``<log dir>/<logger>.log``
      * Rotation at 10MB, 5 backups kept
    - Development (default):
      * Human-readable console output, no files

    Returns:
        Dictionary mapping short logger names ("api", "services", "db")
        to configured Logger instances.
    """
    log_level = _get_log_level()
    is_prod = _is_production()
    log_dir = _get_log_dir() if is_prod else None

    loggers = {}
    for logger_name in LOGGER_NAMES:
        logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{logger_name}")
        logger.setLevel(log_level)
        logger.propagate = False
        logger.handlers.clear()

        if is_prod:
            handler = logging.handlers.RotatingFileHandler(
                log_dir / f"{logger_name}.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8"
            )
            handler.setFormatter(JSONFormatter())
        else:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(ConsoleFormatter())
        handler.setLevel(log_level)
        logger.addHandler(handler)

        loggers[logger_name] = logger

    return loggers


_loggers: Optional[Dict[str, logging.Logger]] = None


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger by short name.

    Args:
        name: One of "api", "services", "db"

    Raises:
        ValueError: If the logger name is not recognized

    Example:
        >>> logger = get_logger("services")
        >>> logger.info("Recomputed spent amount for bgc_01hgw...")
    """
    global _loggers

    if _loggers is None:
        _loggers = configure_logging()

    if name not in _loggers:
        raise ValueError(
            f"Unknown logger name: {name}. "
            f"Valid names: {', '.join(_loggers.keys())}"
        )

    return _loggers[name]


def init_logging() -> Dict[str, logging.Logger]:
    """(Re)initialize logging; called once when the application is created."""
    global _loggers
    _loggers = configure_logging()
    return _loggers
