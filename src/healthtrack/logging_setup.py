from __future__ import annotations

import json
import logging
import logging.config
import os
from contextvars import ContextVar

_CURRENT_USER_ID: ContextVar[str] = ContextVar("healthtrack_user_id", default="-")
_STANDARD_LOGRECORD_ATTRS = {
    "name",
    "msg",
    "message",
    "asctime",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}


class _UserIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "user_id") or getattr(record, "user_id") in (None, ""):
            record.user_id = _CURRENT_USER_ID.get()
        return True


class _JsonExtraFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = _extract_extras(record)
        if not extras:
            return base
        extras_json = json.dumps(extras, default=str, sort_keys=True)
        return f"{base} {extras_json}"


def _extract_extras(record: logging.LogRecord) -> dict[str, object]:
    extras: dict[str, object] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOGRECORD_ATTRS:
            continue
        if key == "user_id":
            continue
        extras[key] = value
    return extras


def set_user_id(user_id: str | None) -> None:
    """Set the `user_id` injected into log records for the current request context."""
    _CURRENT_USER_ID.set(user_id or "-")


def current_user_id() -> str:
    return _CURRENT_USER_ID.get()


def _install_user_filter() -> None:
    root = logging.getLogger()
    for handler in root.handlers:
        if any(isinstance(f, _UserIdFilter) for f in handler.filters):
            continue
        handler.addFilter(_UserIdFilter())


def configure_logging(*, log_level: str = "INFO") -> None:
    """Configure root logging with a consistent format.

    Format includes the acting `user_id` plus `module:lineno`; `extra=` fields
    are appended as JSON.
    """
    console_level_name = str(log_level).upper()
    default_console_fmt = "%(asctime)s %(levelname)s [%(user_id)s] %(module)s:%(lineno)d %(message)s"
    console_fmt = os.getenv("CONSOLE_LOG_FORMAT", default_console_fmt)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "()": "healthtrack.logging_setup._JsonExtraFormatter",
                    "format": console_fmt,
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": console_level_name,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {"level": "DEBUG", "handlers": ["console"]},
        }
    )

    _install_user_filter()
    logging.captureWarnings(True)

    # Reduce noisy third-party request logs by default.
    for noisy in ("boto3", "botocore", "urllib3", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
