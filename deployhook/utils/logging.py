"""Structured JSON logging for deployhook."""

import json
import logging
import os
from datetime import UTC, datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "deployhook"

# Base name of the rotating log file inside the log directory
LOG_FILE_NAME = "deploy.log"

DEFAULT_RETENTION_DAYS = 20


# Attributes every LogRecord carries; anything else on a record came from ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JsonFormatter(logging.Formatter):
    """Render a record as a single-line JSON object.

    Fixed keys are ``timestamp``, ``level``, ``logger`` and ``message``, plus
    ``exception`` when the record carries a traceback. Every ``extra=`` field
    is appended as its own key.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, _jsonable(value))
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        return json.dumps(entry)


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: str | None = None,
    log_dir: str | Path | None = None,
    retention_days: int = DEFAULT_RETENTION_DAYS,
    name: str = ROOT_LOGGER_NAME,
) -> logging.Logger:
    """Configure structured JSON logging for the service.

    Records always go to the console. When ``log_dir`` is given they are also
    written to a file in that directory which is rotated at midnight, keeping
    ``retention_days`` old files.

    Args:
        level: Log level name. Defaults to the ``LOG_LEVEL`` environment variable, then INFO.
        log_dir: Directory for the rotating log file, or None for console only.
        retention_days: Number of rotated files to keep.
        name: The root logger name.

    Returns:
        Configured logger instance.
    """
    log_level = _resolve_level(level)
    formatter = JsonFormatter()

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Reconfiguring must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(log_level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            directory / LOG_FILE_NAME,
            when="midnight",
            backupCount=retention_days,
            encoding="utf-8",
            utc=True,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """Get a child logger for a specific module.

    Args:
        module_name: The module name to create a child logger for.

    Returns:
        Child logger instance.
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")
