"""API middleware: CORS, request logging and error handling.

``ErrorHandlingMiddleware`` turns every ``LectroError`` raised by a route or
dependency into the JSON body ``{"error": <message>, "errorType": <class>}``
with the status code the error class carries.  Request-body validation
failures get the same envelope with status 400 via
:func:`validation_exception_handler`.

Starlette middleware is a stack (last added runs first).  ``create_app``
adds ``ErrorHandlingMiddleware`` before ``RequestLoggingMiddleware`` so the
logging middleware sees the final status code.
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from lectro.api.schemas import ErrorResponse
from lectro.utils.errors import LectroError, ValidationError
from lectro.utils.logging import (
    REQUEST_ID_HEADER,
    bind_request_context,
    clear_request_context,
    get_logger,
)

_logger: structlog.BoundLogger = get_logger(__name__)


def error_response(message: str, error_type: str, status_code: int) -> JSONResponse:
    body = ErrorResponse(error=message, error_type=error_type)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    The reader runs as a web app, a desktop shell and a mobile shell, each
    with its own origin, so the default allows all origins.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration.

    Each request gets a request id (the client's ``X-Request-ID`` when sent)
    bound into the structlog context, so every event logged while handling
    it carries the id.  The id is echoed back in the response header.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = bind_request_context(request.headers.get(REQUEST_ID_HEADER))
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )
            clear_request_context()


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch ``LectroError`` subclasses and return structured JSON errors.

    The client sees the error message and class name only; provider names
    and tracebacks stay in the server log.  Exceptions outside the hierarchy
    fall through to Starlette's default 500 handler.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except LectroError as exc:
            log = _logger.warning if exc.status_code < 500 else _logger.error
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
                status=exc.status_code,
            )
            return error_response(exc.message, type(exc).__name__, exc.status_code)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map FastAPI's request validation failure (normally 422) to 400."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "")
    else:
        message = "Invalid request"
    _logger.warning(
        "request_validation_failed",
        path=str(request.url.path),
        errors=len(errors),
        message=message,
    )
    return error_response(message or "Invalid request", ValidationError.__name__, 400)


def install_error_handling(app: FastAPI) -> None:
    """Attach the error middleware and the validation handler to *app*."""
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
