"""
Declarative access decorators for route handlers.

Usage:
    @router.get("/")
    @require_permissions(Permission.VIEW_EMPLOYEE_PROFILES)
    async def list_members(request: Request, db=Depends(get_database)):
        ...

Must be applied AFTER the route decorator. The handler must accept the
`request` and `db` parameters; the target business is taken from the
`body` model, the `businessId` query parameter or the `business_id` path
parameter, in that order.
"""

from functools import wraps
from typing import Any, Iterable, Optional

from fastapi import HTTPException, status
from starlette.requests import Request

from shiftly.config.database import get_database
from .resolver import PermissionResolver, Requirement, resolve_business_id


def _find_request(args: tuple, kwargs: dict) -> Request:
    request: Request | None = kwargs.get("request")
    if request is None:
        for arg in args:
            if isinstance(arg, Request):
                request = arg
                break
    if request is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Request object not found in handler",
        )
    return request


def require_access(
    permissions: Optional[Iterable[Any]] = None,
    roles: Optional[Iterable[Any]] = None,
):
    """Allow the call only if the current user meets both requirements."""
    requirement = Requirement.of(permissions=permissions, roles=roles)

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request = _find_request(args, kwargs)
            db = kwargs.get("db")
            if db is None:
                db = await get_database()

            user = getattr(request.state, "user", None) or {}
            business_id = resolve_business_id(
                body=kwargs.get("body"),
                query=dict(request.query_params),
                path=dict(request.path_params),
            )

            await PermissionResolver(db).authorize(
                user.get("id"), requirement, business_id
            )

            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_permissions(*permissions: Any):
    return require_access(permissions=permissions)


def require_roles(*roles: Any):
    return require_access(roles=roles)
