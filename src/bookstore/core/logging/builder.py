# src/bookstore/core/logging/builder.py
"""
Logging builder: create and apply a dictConfig logging configuration.

    setup_logging(settings)

is called once at process start (see `bookstore.main.run`). Everything else in
the code base just does `logging.getLogger(__name__)`.

Handler selection:
| `LOG_TO_STDOUT` | `LOG_DIR` set  | Active handlers                 |
| --------------- | -------------- | ------------------------------- |
| true            | doesn't matter | console + error_console         |
| false           | no             | console + error_console         |
| false           | yes            | console + file + error_file     |
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config

from bookstore.utils.logging import get_project_name
from bookstore.config.settings import Settings

from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping using the provided settings.

    The returned mapping includes:
      - formatters: "standard" (colored in text mode) and "json"
      - filters: "request_id", "redact"
      - handlers: console, plus file/error_file or error_console
      - loggers: root, uvicorn.error, uvicorn.access, sqlalchemy.engine
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(default="bookstore-api"),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": _loggers(settings, list(handlers)),
    }


def _loggers(settings: Settings, active: list[str]) -> dict[str, dict]:
    sql_level = "INFO" if settings.ENABLE_SQL_LOGGING else "WARNING"
    # statement logging echoes bound parameters (book names, prices)
    table = [
        ("", settings.LOG_LEVEL, active, True),
        ("uvicorn.error", settings.LOG_LEVEL, active, False),
        ("uvicorn.access", "INFO", ["console"], False),
        ("sqlalchemy.engine", sql_level, ["console"], False),
    ]
    return {
        name: {"level": level, "handlers": list(names), "propagate": propagate}
        for name, level, names, propagate in table
    }


def setup_logging(settings: Settings) -> None:
    """
    Initialize logging using settings.

    Steps:
      1. Create LOG_DIR when writing files.
      2. Apply dictConfig(make_dict_config(settings)).
      3. Put a RequestIdFilter on the root logger so `%(request_id)s` is always
         resolvable, even for handlers added later by third parties.
    """
    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(RequestIdFilter())
