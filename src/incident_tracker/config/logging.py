"""
Logging setup shared by the API server, the seed command and the CLI.

structlog events run through one processor chain that ends in a console
renderer (development, or ``LOG_FORMAT=text``) or a JSON renderer. Standard
library records from uvicorn, SQLAlchemy and httpx go to the root handlers:
rich in development, JSON lines elsewhere, plus an optional size-rotated file.
"""

import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

from .config import Settings, get_settings

SIZE_UNITS = {"KB": 1024, "MB": 1024**2, "GB": 1024**3}

# Library loggers that are too chatty at INFO.
LIBRARY_LEVELS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "asyncio": logging.WARNING,
}


class JsonLineFormatter(logging.Formatter):
    """Render a stdlib record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure stdlib handlers and structlog for the current environment.

    Calling it again replaces the root handlers instead of stacking them.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)

    handlers = [_console_handler(settings)]
    if settings.log_file:
        handlers.append(_file_handler(settings))
    for handler in handlers:
        handler.setLevel(level)
    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name, library_level in _library_levels(settings).items():
        logging.getLogger(name).setLevel(library_level)

    structlog.configure(
        processors=_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    get_logger("config.logging").debug(
        "Logging configured",
        level=settings.log_level,
        format=settings.log_format,
        file=settings.log_file,
    )


def _console_handler(settings: Settings) -> logging.Handler:
    if settings.is_development:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            markup=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
        return handler

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonLineFormatter())
    return handler


def _file_handler(settings: Settings) -> logging.Handler:
    path = Path(settings.log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    if settings.log_rotation:
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=parse_size(settings.log_max_size),
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        )
    else:
        handler = logging.FileHandler(path, encoding="utf-8")

    handler.setFormatter(JsonLineFormatter())
    return handler


def _library_levels(settings: Settings) -> dict[str, int]:
    levels = dict(LIBRARY_LEVELS)
    # SQL statements are only interesting when echo is on.
    levels["sqlalchemy.engine"] = logging.INFO if settings.database_echo else logging.WARNING
    levels["uvicorn.access"] = logging.INFO if settings.is_development else logging.WARNING
    if not settings.debug:
        levels["uvicorn"] = logging.WARNING
    return levels


def _processors(settings: Settings) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _app_context(settings),
    ]

    if settings.is_development or settings.log_format == "text":
        processors += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=settings.is_development)]
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return processors


def _app_context(settings: Settings):
    """Processor stamping each event with the app version and environment."""
    context = {"app_version": settings.app_version, "environment": settings.environment}

    def add_app_context(logger, method_name, event_dict):
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_app_context


def parse_size(value: str) -> int:
    """Convert sizes such as ``100MB`` or ``512KB`` to bytes. Bare numbers are bytes."""
    value = value.strip().upper()
    for unit, factor in SIZE_UNITS.items():
        if value.endswith(unit):
            return int(value[: -len(unit)]) * factor
    return int(value)


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def log_error(error: Exception, **context: Any) -> None:
    """Log ``error`` with its type and traceback, plus any keyword context."""
    get_logger("errors").error(
        "Unhandled error",
        error=str(error),
        error_type=type(error).__name__,
        exc_info=error,
        **context,
    )
