"""Structured logging for the duo tracker.

The tracker is a long-running process, so logs default to one JSON object
per line; ``--pretty`` switches to structlog's console renderer for local
runs. Context bound with ``duo_context`` (the duo being polled) is merged
into every event logged while it is active.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

import structlog
from structlog.contextvars import bound_contextvars, merge_contextvars
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    TimeStamper,
    add_log_level,
    format_exc_info,
)

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("aiohttp.access", "aiohttp.client", "asyncio")


def configure_logging(cli_mode: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog for the tracker.

    Args:
        cli_mode: If True, render coloured key/value lines for a terminal.
                  If False, render JSON lines.
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
                   unknown names fall back to INFO
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        merge_contextvars,
        add_log_level,
        TimeStamper(fmt="iso", utc=True),
        StackInfoRenderer(),
    ]

    if cli_mode:
        from structlog.dev import ConsoleRenderer
        processors.append(ConsoleRenderer(colors=True))
    else:
        processors.extend([format_exc_info, JSONRenderer()])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=max(level, logging.WARNING))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def duo_context(duo_id: int, duo_name: str) -> Iterator[None]:
    """Tag every event logged inside the block with the duo being processed."""
    with bound_contextvars(duo_id=duo_id, duo=duo_name):
        yield


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, named after the calling module when ``name`` is given."""
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()
