import logging
import time
import uuid
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

# Configure root logger once (simple, readable format)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

logger = logging.getLogger("ymit.request")

REQUEST_ID_HEADER = "X-Request-ID"

class RequestLogMiddleware(BaseHTTPMiddleware):
    """One log line per request; echoes (or mints) a request id header."""

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        client = request.client.host if request.client else "-"
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "rid=%s client=%s %s %s status=500 duration_ms=%.2f UNHANDLED",
                request_id, client, request.method, target,
                (time.perf_counter() - start) * 1000.0,
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "rid=%s client=%s %s %s status=%s duration_ms=%.2f",
            request_id, client, request.method, target, response.status_code,
            (time.perf_counter() - start) * 1000.0,
        )
        return response

def register_request_logging(app):
    app.add_middleware(RequestLogMiddleware)
