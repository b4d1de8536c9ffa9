"""
Request logging middleware.

Every request gets a short id, kept in a ContextVar so handlers and the
error handlers can prefix their log lines with it.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger(__name__)


def get_request_id() -> str:
    """Id of the request being handled, or "" outside a request."""
    return request_id_ctx.get()


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per request with status and elapsed time.

    A client-supplied X-Request-ID is reused so logs can be matched
    across services; otherwise an 8-character id is generated. The id is
    returned in the X-Request-ID response header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request_id_ctx.set(req_id)
        route = f"{request.method} {request.url.path}"

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"[{req_id}] {route} failed after {_elapsed_ms(started):.0f}ms",
                extra={"request_id": req_id, "path": request.url.path},
                exc_info=True,
            )
            raise

        elapsed = _elapsed_ms(started)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"[{req_id}] {route} -> {response.status_code} ({elapsed:.0f}ms)",
            extra={
                "request_id": req_id,
                "path": request.url.path,
                "status_code": response.status_code,
                "elapsed_ms": elapsed,
            },
        )

        response.headers[REQUEST_ID_HEADER] = req_id
        return response
