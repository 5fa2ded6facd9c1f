"""structlog configuration for the Lectro server and CLI.

One processor chain serves both structlog loggers and stdlib ``logging``
(uvicorn, httpx, openai), so every line has the same shape.  The last
processor is the renderer: JSON in production, coloured key/value output
otherwise.

Request-scoped fields travel in ``structlog.contextvars``.
``RequestLoggingMiddleware`` calls :func:`bind_request_context` with a
request id at the start of each request, and every event logged while that
request is handled (store merges, embedding batches, errors) carries it.

The server logs to stdout.  The CLI prints its results on stdout and
passes ``to_stderr=True`` so log lines never mix into them.
"""

import logging
import sys
import uuid
from collections.abc import Callable
from typing import Any

import structlog

# HTTP client libraries log every request at INFO; one line per embedding
# batch is already emitted by the providers.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")

REQUEST_ID_HEADER = "X-Request-ID"


def _build_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _print_logger_factory(to_stderr: bool) -> Callable[..., structlog.PrintLogger]:
    # Resolve the stream when a logger is created, not at configure time, so
    # a replaced sys.stdout / sys.stderr is honoured.
    def factory(*args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=sys.stderr if to_stderr else sys.stdout)

    return factory


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    to_stderr: bool = False,
) -> structlog.BoundLogger:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Render JSON lines instead of console output.
        to_stderr: Log to stderr instead of stdout (used by the CLI).

    Returns:
        The root structlog logger.
    """
    level = logging.getLevelName(log_level.upper())
    out = sys.stderr if to_stderr else sys.stdout
    shared = _build_processors()

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=out.isatty())

    structlog.configure(
        processors=[*shared, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=_print_logger_factory(to_stderr),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared,
                renderer,
            ],
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound with ``logger_name=name``."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)


def bind_request_context(request_id: str | None = None, **fields: Any) -> str:
    """Start a fresh request context and return its request id.

    A client-supplied *request_id* is reused so calls can be traced across
    services; otherwise a new one is generated.
    """
    request_id = request_id or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **fields)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
