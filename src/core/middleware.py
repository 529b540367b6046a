"""
Request tracing for the HTTP API.

Each request is tagged with an id (taken from X-Request-ID when the caller
sends one) and, for /api/indices/<name>/... routes, the Algolia index it
targets. Both are bound into the structlog context for the lifetime of the
request so every log line emitted while handling it carries them.
"""

import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging import bind_context, clear_context, get_logger


logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_INDICES_PREFIX = "/api/indices/"


def index_name_from_path(path: str) -> Optional[str]:
    """
    Return the index segment of an /api/indices/<name>/... path.

    >>> index_name_from_path("/api/indices/products/settings")
    'products'
    """
    if not path.startswith(_INDICES_PREFIX):
        return None

    name = path[len(_INDICES_PREFIX):].split("/", 1)[0]
    return name or None


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Binds request id and target index, logs the outcome and its duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        index_name = index_name_from_path(request.url.path)
        if index_name:
            context["index_name"] = index_name
        bind_context(**context)

        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request raised",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(started),
            )
            raise
        else:
            log = logger.error if response.status_code >= 500 else logger.info
            log(
                "Request handled",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_context()
