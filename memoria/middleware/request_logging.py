from fastapi import Request
import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("memoria")

REQUEST_ID_HEADER = "X-Request-ID"

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with a correlation id and echoes the id back to the client"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        started = time.perf_counter()

        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        logger.info(f"[{request_id}] {request.method} {target}")

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"[{request_id}] Unhandled error on {request.method} {request.url.path}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"[{request_id}] {response.status_code} in {elapsed_ms:.1f}ms")
        response.headers[REQUEST_ID_HEADER] = request_id

        return response
