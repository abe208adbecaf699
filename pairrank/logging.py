"""structlog setup for pairrank.

Output is one JSON object per line unless PAIRRANK_LOG_JSON is false, in
which case the Rich-backed console renderer is used. Context bound with
structlog.contextvars (the service binds winner_id / loser_id while a
vote is applied) is merged into every event, and each logger records the
module it belongs to under "logger".
"""

import logging
from typing import TextIO

import structlog
from structlog._config import BoundLoggerLazyProxy
from structlog.contextvars import merge_contextvars
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    TimeStamper,
    add_log_level,
    format_exc_info,
)


def configure_logging(
    cli_mode: bool | None = None,
    log_level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the process.

    Args:
        cli_mode: Console renderer if True, JSON if False.
                  Defaults to the inverse of PAIRRANK_LOG_JSON.
        log_level: Minimum level name, defaults to PAIRRANK_LOG_LEVEL.
                   Unknown names fall back to INFO.
        stream: Where log lines go (stdout if None)
    """
    from pairrank import config as settings

    if cli_mode is None:
        cli_mode = not settings.LOG_JSON
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)

    if cli_mode:
        from structlog.dev import ConsoleRenderer
        renderer = ConsoleRenderer(colors=stream is None)
    else:
        renderer = JSONRenderer(sort_keys=True)

    structlog.configure(
        processors=[
            merge_contextvars,
            add_log_level,
            TimeStamper(fmt="iso", utc=True),
            StackInfoRenderer(),
            format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Logger for a module, tagged with its name when one is given."""
    if name:
        # structlog.get_logger(logger=...) collides with wrap_logger's own
        # ``logger`` parameter, so build the same lazy proxy directly.
        return BoundLoggerLazyProxy(None, initial_values={"logger": name})
    return structlog.get_logger()
