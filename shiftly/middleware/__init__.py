"""
Authentication middleware.

Runs on every request (except PUBLIC_ROUTES):
  1. Decode JWT → extract user id and email
  2. Set request.state.user = {"id", "email"}

Authorization is NOT decided here: roles and permissions are resolved per
route by the rbac decorators, against the database, on every request.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from shiftly.auth.helpers import decode_access_token
from shiftly.config import settings
from shiftly.utils import Logger
from .request_logging import RequestLoggingMiddleware

logger = Logger("auth")

__all__ = ["AuthMiddleware", "RequestLoggingMiddleware", "PUBLIC_ROUTES"]

# Exact paths that skip authentication
PUBLIC_ROUTES = frozenset({
    f"/api/{settings.api_version}/auth/signup",
    f"/api/{settings.api_version}/auth/login",
    "/health",
    "/openapi.json",
    "/api/docs",
    "/api/docs/oauth2-redirect",
    "/redoc",
})


class AuthMiddleware(BaseHTTPMiddleware):
    """Verifies the bearer token and exposes the caller on request.state."""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        if path.rstrip("/") in PUBLIC_ROUTES:
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            return JSONResponse(
                status_code=401,
                content={"detail": "Missing Authorization header"},
            )

        if not auth_header.startswith("Bearer "):
            return JSONResponse(
                status_code=401,
                content={"detail": "Invalid token format. Expected 'Bearer <token>'"},
            )

        token = auth_header.split(" ", 1)[1].strip()

        try:
            payload = decode_access_token(token)
        except Exception as e:
            logger.warning(f"Rejected token on {request.method} {path}: {e}")
            return JSONResponse(
                status_code=401,
                content={"detail": "Invalid or expired token"},
            )

        user_id = payload.get("sub")
        if not user_id:
            return JSONResponse(
                status_code=401,
                content={"detail": "Token has no subject"},
            )

        request.state.user = {"id": user_id, "email": payload.get("email")}
        return await call_next(request)
