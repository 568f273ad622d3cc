"""
Request logging middleware.

One line when a request arrives and one when it completes, tagged with a
request id. The id is taken from the incoming ``x-request-id`` header when
present and echoed back on the response together with ``x-response-time``.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from shiftly.utils import Logger

logger = Logger("request")

EXCLUDED_PATHS = {"/health", "/favicon.ico"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, excluded_paths: set[str] | None = None):
        super().__init__(app)
        self.excluded_paths = excluded_paths or EXCLUDED_PATHS

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path in self.excluded_paths:
            return await call_next(request)

        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        client = request.client.host if request.client else "unknown"
        label = f"[{request_id}] {request.method} {path}"

        logger.info(f"--> {label} (from {client})")
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed = (time.perf_counter() - start) * 1000
            logger.error(f"<-- {label} | 500 | {elapsed:.1f}ms | {exc!r}")
            raise

        elapsed = (time.perf_counter() - start) * 1000
        user = getattr(request.state, "user", None)
        caller = f" | user {user['id']}" if user else ""
        line = f"<-- {label} | {response.status_code} | {elapsed:.1f}ms{caller}"

        if response.status_code >= 500:
            logger.error(line)
        elif response.status_code >= 400:
            logger.warning(line)
        else:
            logger.info(line)

        response.headers["x-request-id"] = request_id
        response.headers["x-response-time"] = f"{elapsed / 1000:.3f}s"
        return response
