"""Structured logging setup for critpath using structlog.

critpath is a library, so its events go through standard library loggers
under the ``critpath`` namespace. Until the host application configures
logging, the stdlib defaults apply: nothing below WARNING is emitted and a
NullHandler keeps the package quiet even for warnings. Applications that want
the events call ``configure_logging`` once at startup, or set up stdlib
logging and structlog themselves.

Example:
    >>> from critpath.log_config import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_logs=False)
    >>> logger = get_logger(__name__)
    >>> logger.debug("edge_added", src="a", dst="b", weight=2)
"""

import logging
import sys
from typing import Any

import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LIBRARY_LOGGER = "critpath"

logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())


def build_processors(json_logs: bool = False) -> list[Any]:
    """Return the structlog processor chain used for critpath events.

    Events below the stdlib logger's effective level are dropped first, so
    per-edge DEBUG events cost little when DEBUG is off.

    Args:
        json_logs: End the chain with the JSON renderer instead of the
            console renderer
    """
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        )
    return processors


def configure_logging(level: str = "WARNING", json_logs: bool = False) -> None:
    """Configure structlog and a stderr handler for applications using critpath.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render events as JSON lines instead of the console renderer

    Raises:
        ValueError: If an unknown log level is provided
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        msg = f"Invalid log level: {level}"
        raise ValueError(msg)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )
    logging.getLogger().setLevel(numeric_level)

    structlog.configure(
        processors=build_processors(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger backed by the stdlib logger called name.

    The wrapped stdlib logger decides whether an event is emitted, so library
    events follow the host's logging levels and handlers even when structlog
    was never configured. Processors are looked up from the active structlog
    configuration each time the logger is used.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.
            Defaults to the ``critpath`` package logger.
    """
    return structlog.wrap_logger(
        logging.getLogger(name or LIBRARY_LOGGER),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def bind_correlation_id(correlation_id: str) -> None:
    """Attach a correlation ID to every event logged in the current context.

    Useful when a caller runs several sorts or path queries per request and
    wants to group the resulting events.

    Args:
        correlation_id: Identifier shared by related log events
    """
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def unbind_correlation_id() -> None:
    """Remove the correlation ID from the logging context."""
    structlog.contextvars.unbind_contextvars("correlation_id")


def bind_context(**kwargs: Any) -> None:
    """Bind arbitrary key/value pairs to the logging context.

    Example:
        >>> bind_context(graph="build-order")
        >>> logger.info("topological_sort_completed")  # includes graph="build-order"
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from the logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear every key bound to the logging context."""
    structlog.contextvars.clear_contextvars()
