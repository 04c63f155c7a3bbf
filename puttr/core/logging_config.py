"""Structured logging configuration.

JSON lines on stdout by default, one object per record, with:
- @timestamp (ISO8601, UTC)
- level
- logger
- service (name and version)
- event_type (for filtering, e.g. "token.issued", "upload.stored")

Set PUTTR_LOG_JSON=false for plain text logs during development.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger import jsonlogger

from .config import Settings

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps every record with service metadata."""

    def __init__(self, settings: Settings, *args, **kwargs):
        self._service = {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }
        super().__init__(
            *args,
            fmt='%(asctime)s %(levelname)s %(name)s %(message)s',
            rename_fields={
                'asctime': '@timestamp',
                'levelname': 'level',
                'name': 'logger',
            },
            **kwargs
        )

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['@timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['service'] = self._service

        if 'event_type' not in log_record:
            log_record['event_type'] = f"log.{record.name}"


def build_formatter(settings: Settings) -> logging.Formatter:
    if settings.LOG_JSON:
        return ServiceJsonFormatter(settings)
    return logging.Formatter(PLAIN_FORMAT)


def configure_logging(settings: Settings) -> None:
    """Configure root and uvicorn logging. Call once at startup."""
    formatter = build_formatter(settings)

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    _configure_uvicorn_loggers(formatter)

    logging.getLogger("puttr").info(
        "Logging configured",
        extra={
            "event_type": "system.startup.logging_configured",
            "log_level": settings.LOG_LEVEL,
            "json": settings.LOG_JSON,
        }
    )


def _configure_uvicorn_loggers(formatter: logging.Formatter) -> None:
    """Route uvicorn's loggers through the same formatter."""
    for logger_name in ['uvicorn', 'uvicorn.error', 'uvicorn.access']:
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
