"""Structured logging for dnd-keeper.

Every event is a structlog key/value record. Combat operations run inside
``combat_context`` so each event they emit carries the combat id (and the
round, once known) without passing it to every call.

Example:
    >>> from dnd_keeper.core.logging import combat_context, get_logger
    >>> logger = get_logger(__name__)
    >>> with combat_context("a1b2c3", round_number=2):
    ...     logger.info("Turn advanced", character="Aragorn")
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from collections.abc import Iterator

    from structlog.types import EventDict, WrappedLogger

    from dnd_keeper.core.config import Settings


APP_NAME = "dnd_keeper"
STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every log entry with the application name."""
    event_dict["app"] = APP_NAME
    return event_dict


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Level name; unknown names fall back to INFO.
        json_format: Render events as JSON lines instead of console text.
        log_file: Also write stdlib records to this file.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_app_context,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(json_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # sqlite3 and tenacity report through the stdlib
    logging.basicConfig(format=STDLIB_FORMAT, level=numeric_level, stream=sys.stdout, force=True)
    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setLevel(numeric_level)
        handler.setFormatter(logging.Formatter(STDLIB_FORMAT))
        logging.getLogger().addHandler(handler)


def configure_logging_from_settings(settings: Settings) -> None:
    """Configure logging from application settings.

    Debug runs get the console renderer, everything else JSON.
    """
    configure_logging(level=settings.log_level, json_format=settings.is_production)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def combat_context(combat_id: str, round_number: int | None = None) -> Iterator[None]:
    """Bind the combat (and round) to every event logged inside the block."""
    context: dict[str, Any] = {"combat_id": combat_id}
    if round_number is not None:
        context["round"] = round_number
    with structlog.contextvars.bound_contextvars(**context):
        yield


def bind_context(**kwargs: Any) -> None:
    """Bind context variables to all subsequent log entries of this task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "combat_context",
    "bind_context",
    "clear_context",
]
