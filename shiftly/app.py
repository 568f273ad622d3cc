"""
Shiftly workforce API — application factory.

Wires settings, the Mongo connection, middleware and the auth, businesses
and roles routers into one FastAPI app.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftly.auth import auth_router
from shiftly.businesses import businesses_router
from shiftly.config import db_manager, ensure_indexes, settings
from shiftly.middleware import AuthMiddleware, RequestLoggingMiddleware
from shiftly.rbac import PermissionCatalog
from shiftly.roles import roles_router
from shiftly.utils import Logger

logger = Logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db_manager.connect()
    db = db_manager.database
    await ensure_indexes(db)
    if settings.seed_catalog_on_startup:
        await PermissionCatalog(db).seed()
    logger.info(f"{settings.app_name} v{settings.app_version} started ({settings.environment})")
    yield
    db_manager.close()


async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": 500,
                "message": str(exc) if settings.debug else "Internal server error",
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the app. Tests pass ``use_lifespan=False`` and override ``get_database``."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Workforce scheduling across businesses with role-based access",
        docs_url="/api/docs",
        lifespan=lifespan if use_lifespan else None,
    )

    # Last added runs first: CORS, then request logging, then auth.
    app.add_middleware(AuthMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allowed_methods,
        allow_headers=settings.cors_allowed_headers,
    )

    app.add_exception_handler(Exception, unhandled_exception)

    prefix = f"/api/{settings.api_version}"
    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["Authentication"])
    app.include_router(businesses_router, prefix=f"{prefix}/businesses", tags=["Businesses"])
    app.include_router(roles_router, prefix=f"{prefix}/roles", tags=["Roles & Permissions"])

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "database": db_manager.is_connected,
        }

    return app


app = create_app()
