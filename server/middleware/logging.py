# server/middleware/logging.py
from fastapi import Request
from uuid import uuid4
import time

from core.logger import get_logger

logger = get_logger(__name__)


async def add_request_id_middleware(request: Request, call_next):
    """Tag each request with an id (reusing an incoming X-Request-ID) and log its timing."""

    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    request.state.request_id = request_id

    start_time = time.perf_counter()
    logger.info(
        f"{request.method} {request.url.path}",
        extra={"request_id": request_id}
    )

    response = await call_next(request)

    duration = time.perf_counter() - start_time
    logger.info(
        f"{request.method} {request.url.path} - {response.status_code} ({duration:.3f}s)",
        extra={"request_id": request_id}
    )

    response.headers["X-Request-ID"] = request_id
    return response
