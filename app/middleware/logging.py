import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("access")

class LoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request with status and timing"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        client = request.client.host if request.client else "unknown"

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{client} {request.method} {request.url.path} {response.status_code} {process_time:.4f}s",
        )

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response
