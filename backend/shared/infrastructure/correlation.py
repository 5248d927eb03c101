"""
Request Correlation Middleware.

Adds correlation IDs to all requests so that every log line emitted while a
cascade walks the entity graph can be tied back to the originating request.
The acting user (``X-Actor``) is captured alongside for the same reason.
"""

import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.constants import ACTOR_HEADER, REQUEST_ID_HEADER

# Context variables (task/thread-local)
request_id_var: ContextVar[str] = ContextVar("request_id", default="")
actor_var: ContextVar[str] = ContextVar("actor", default="")


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add correlation IDs to all requests.

    - If X-Request-ID header is present, uses that value
    - Otherwise generates a new UUID
    - Sets the ID (and the X-Actor header) in context for logging
    - Returns the ID in response headers
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER)
        if not request_id:
            request_id = str(uuid.uuid4())

        token = request_id_var.set(request_id)
        actor_token = actor_var.set(request.headers.get(ACTOR_HEADER, "").strip())

        try:
            request.state.request_id = request_id
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            actor_var.reset(actor_token)
            request_id_var.reset(token)


class CorrelationIdFilter:
    """
    Logging filter that adds request_id and actor to log records.

    Usage:
        import logging
        handler = logging.StreamHandler()
        handler.addFilter(CorrelationIdFilter())
    """

    def filter(self, record) -> bool:
        record.request_id = request_id_var.get() or "-"
        record.actor = actor_var.get() or "-"
        return True
