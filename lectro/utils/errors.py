"""Custom exception hierarchy for Lectro.

All application exceptions inherit from :class:`LectroError`, which carries
an optional ``provider_name`` so error handlers can identify which external
service (e.g. "openai_embedding", "json_file") caused the failure, and a
class-level ``status_code`` used by the API layer when the error reaches the
request boundary.

The hierarchy is organized by concern:

    LectroError  (base -- catch-all for any Lectro error)
    +-- ValidationError     (missing or invalid request fields)      400
    +-- ConfigurationError  (missing provider credentials, bad config) 500
    +-- ReadError           (corrupt or unreadable vector store file)  500
    +-- WriteError          (serialization or disk-write failure)      500
    +-- ProviderError       (embedding / LLM generation failure)       500

None of these crash the process: ``ErrorHandlingMiddleware`` in
``lectro.api.middleware`` turns every ``LectroError`` into a JSON error body.
"""


class LectroError(Exception):
    """Base exception for all Lectro errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which backend triggered the error.  The
    ``__str__`` method prefixes the provider name in brackets for structured
    log output, e.g. ``[openai_embedding] Quota exceeded``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Request errors
# ---------------------------------------------------------------------------

class ValidationError(LectroError):
    """Raised when a request is missing a required field or carries an invalid one."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(LectroError):
    """Raised when configuration is invalid or provider credentials are missing."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Vector store errors
# ---------------------------------------------------------------------------

class ReadError(LectroError):
    """Raised when the vector store file exists but cannot be read or parsed.

    A *missing* store file is not an error -- it reads as an empty store.
    """

    def __init__(
        self,
        message: str = "Index read failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class WriteError(LectroError):
    """Raised when the vector store cannot be serialized or written to disk."""

    def __init__(
        self,
        message: str = "Failed to save vectors",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External provider errors
# ---------------------------------------------------------------------------

class ProviderError(LectroError):
    """Raised when an embedding or LLM provider call fails.

    Covers quota, network and malformed-response failures.  Callers must
    surface this to the user rather than substituting a default vector.
    The API reports it as a plain 500, like any other server-side failure.
    """

    def __init__(
        self,
        message: str = "Provider call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
