"""Utility modules for Lectro.

- **errors** -- Domain-specific exception hierarchy rooted at LectroError;
  each class carries the HTTP status the API layer responds with.
- **logging** -- structlog setup (console or JSON renderer, stdlib bridged
  through the same chain) and the per-request context helpers.
"""

from lectro.utils.errors import (
    ConfigurationError,
    LectroError,
    ProviderError,
    ReadError,
    ValidationError,
    WriteError,
)
from lectro.utils.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "ConfigurationError",
    "LectroError",
    "ProviderError",
    "ReadError",
    "ValidationError",
    "WriteError",
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
    "get_logger",
]
