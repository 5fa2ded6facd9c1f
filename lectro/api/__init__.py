"""HTTP API: routes, request/response schemas and middleware."""

from lectro.api.routes import router

__all__ = ["router"]
