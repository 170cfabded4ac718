"""structlog setup shared by the CLI and services."""

from __future__ import annotations

import logging
import sys
import uuid
from typing import TYPE_CHECKING, TextIO

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

if TYPE_CHECKING:
    from career_compass_core.config.settings import Settings

_NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "anthropic", "instructor")

_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(settings: Settings, stream: TextIO | None = None) -> None:
    """Route structlog and stdlib logging through one handler.

    ``settings.log_format`` picks the renderer ("json" for aggregation,
    anything else for a human console) and ``settings.log_level`` the root
    level. Output goes to ``stream``, stderr by default.
    """
    level = _resolve_level(settings.log_level)
    pre_chain = _shared_processors()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings.log_format),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # HTTP and SQL chatter only shows at WARNING and above
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_request_context(request_id: str | None = None, **extra: object) -> str:
    """Tag subsequent log entries with a request id (generated when omitted)."""
    request_id = request_id or uuid.uuid4().hex[:12]
    bind_contextvars(request_id=request_id, **extra)
    return request_id


def clear_request_context() -> None:
    """Drop every bound context variable."""
    clear_contextvars()


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _resolve_level(level_name: str) -> int:
    """Map a level name to its logging constant, INFO when unknown."""
    return _LEVELS.get(level_name.upper(), logging.INFO)
