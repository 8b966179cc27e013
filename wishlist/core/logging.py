"""Wishlist logging configuration.

Log records carry the request they were emitted under. The auth gate binds
method and path for every request, and the verified subject and token id
once the bearer token checks out; ``RequestContextFilter`` copies whatever
is bound onto each record so both output formats can show it.
"""

import json
import logging
import sys
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from wishlist.core.config import Settings

LogFormat = Literal["structured", "dev"]

# Fields a request may bind, in output order
CONTEXT_FIELDS = ("method", "path", "subject_id", "token_id")

DEV_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s%(context)s"

_request_context: ContextVar[dict[str, Any] | None] = ContextVar("request_context", default=None)


def get_request_context() -> dict[str, Any]:
    """Fields bound for the current request, or an empty dict outside one."""
    return dict(_request_context.get() or {})


def bind_request_context(**fields: Any) -> Token:
    """Add fields to the current request context.

    Returns a token for ``reset_request_context``; unknown field names are
    rejected so typos do not silently vanish from the logs.
    """
    unknown = set(fields) - set(CONTEXT_FIELDS)
    if unknown:
        raise ValueError(f"Unknown log context fields: {', '.join(sorted(unknown))}")
    return _request_context.set({**(_request_context.get() or {}), **fields})


def reset_request_context(token: Token) -> None:
    _request_context.reset(token)


class RequestContextFilter(logging.Filter):
    """Copy the bound request fields onto every record passing the handler.

    Values passed explicitly through ``extra=`` win over bound ones.
    ``record.context`` is a ready-made suffix for the dev format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_request_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        parts = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        ]
        record.context = f" | {' '.join(parts)}" if parts else ""
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per log line.

    Fields are serialized with json.dumps() so quotes and newlines in
    messages cannot break the line format.
    """

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def build_handler(format_type: LogFormat, stream=None) -> logging.Handler:
    """A stream handler with the request-context filter attached."""
    handler = logging.StreamHandler(stream or sys.stdout)
    if format_type == "structured":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(DEV_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(RequestContextFilter())
    return handler


def setup_logging(level: str = "INFO", format_type: LogFormat = "dev") -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format - 'structured' for JSON, 'dev' for readable
    """
    logging.root.handlers = [build_handler(format_type)]
    logging.root.setLevel(getattr(logging, level.upper()))

    # Uvicorn's own access log duplicates the request lines we emit
    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # SQL echo only at DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if level.upper() == "DEBUG" else logging.WARNING
    )

    get_logger("logging").info(f"Logging configured: level={level}, format={format_type}")


def configure_logging(config: "Settings") -> None:
    """Apply the configured level; debug deployments get the readable format."""
    setup_logging(level=config.log_level, format_type="dev" if config.debug else "structured")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the wishlist prefix."""
    return logging.getLogger(f"wishlist.{name}")
