"""structlog configuration for socialgraph.

Everything goes to stderr so stdout stays reserved for command results.
Console lines by default, JSON lines with ``--log-json``.

Service and store modules log through ``logging.getLogger(__name__)``;
the stdlib records pass through the same structlog processor chain, so
the store fields bound by :func:`bind_store_context` appear on every
event: store open, error translation, dropped dangling edges.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from socialgraph.infrastructure.store import GraphStore

APP_LOGGER = "socialgraph"

# Third-party loggers that stay at WARNING even under --verbose.
_QUIET_LOGGERS = ("alembic", "sqlalchemy.engine", "sqlalchemy.pool")


def _processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route socialgraph and library logging through structlog.

    Safe to call repeatedly: the root handler is replaced, not stacked,
    and any previously bound store context is cleared.

    Args:
        verbose: ``socialgraph`` loggers at DEBUG instead of WARNING.
        log_json: One JSON object per line instead of console output.
    """
    shared = _processors()
    structlog.contextvars.clear_contextvars()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_store_context(store: GraphStore) -> None:
    """Tag subsequent log events with the backend (and database path) in use."""
    fields: dict[str, str] = {"store": store.backend}
    db_path = getattr(store, "db_path", None)
    if db_path is not None:
        fields["db"] = str(db_path)
    structlog.contextvars.bind_contextvars(**fields)
    structlog.get_logger(APP_LOGGER).debug("store opened")
