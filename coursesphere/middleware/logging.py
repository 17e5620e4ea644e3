"""Request logging for the development backend."""

import time
import uuid

import structlog
from fastapi import Request

from coursesphere.core.logging import get_logger

logger = get_logger(__name__)


async def logging_middleware(request: Request, call_next):
    """Log each request once it completes, tagged with a request id.

    The id is bound into structlog's context so events logged by the routes
    and the repository during the request carry it too.
    """
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    segments = [part for part in request.url.path.split("/") if part]
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        collection=segments[0] if segments else None,
    )
    start = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        structlog.contextvars.clear_contextvars()

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    log = logger.warning if response.status_code >= 400 else logger.info
    log(
        "request completed",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    response.headers["x-request-id"] = request_id
    return response
