import logging
import sys
from typing import Optional, TextIO

import structlog

RENDERERS = ("json", "console")


def _level_number(level: int | str) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(level.upper())
    return number if isinstance(number, int) else logging.INFO


def _renderer(fmt: str):
    if fmt == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def configure_logging(
    level: int | str = logging.INFO,
    fmt: str = "json",
    stream: Optional[TextIO] = None,
) -> None:
    """Route stdlib logging and structlog through one handler.

    The backend logs JSON lines to stdout. The CLI passes ``stream=sys.stderr``
    so its own output on stdout stays clean. Request-scoped values bound with
    ``structlog.contextvars`` are merged into every event.
    """
    if fmt not in RENDERERS:
        raise ValueError(f"unknown log format {fmt!r}, expected one of {RENDERERS}")

    timestamper = structlog.processors.TimeStamper(fmt="iso")
    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        timestamper,
    ]

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(fmt),
            foreign_pre_chain=shared,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(_level_number(level))
    # httpx logs every request at INFO; the client logs its own failures
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None):
    """``logger = get_logger(__name__)`` at module level."""
    return structlog.get_logger(name)
