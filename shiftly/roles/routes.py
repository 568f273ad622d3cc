"""
Role Routes — custom roles and the permission catalog of a business.

All endpoints are limited to business owners: the route guard requires the
owner role, and the service checks ownership of the specific business.

Endpoints:
    GET    /?businessId=                 List custom roles
    GET    /catalog?businessId=          Predefined roles + custom roles + catalog
    POST   /                             Create a custom role
    POST   /predefined                   Materialize a predefined role
    POST   /assign                       Assign a role to a member
    GET    /{role_id}                    Read a role
    PUT    /{role_id}                    Rename and/or replace permissions
    PUT    /{role_id}/permissions        Replace permissions
    DELETE /{role_id}                    Delete an unassigned role
"""

from fastapi import APIRouter, Depends, Query, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from shiftly.config import get_database
from shiftly.rbac import PredefinedRole, require_roles
from shiftly.utils import success_response
from .schemas import (
    AssignRoleRequest,
    CreatePredefinedRoleRequest,
    CreateRoleRequest,
    UpdateRolePermissionsRequest,
    UpdateRoleRequest,
)
from .service import RoleService

roles_router = APIRouter()


def _user_id(request: Request) -> str:
    return request.state.user["id"]


@roles_router.get("/")
@require_roles(PredefinedRole.OWNER)
async def list_roles(
    request: Request,
    business_id: str = Query(..., alias="businessId"),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    roles = await RoleService(db).list_roles(_user_id(request), business_id)
    return success_response(data=roles)


@roles_router.get("/catalog")
@require_roles(PredefinedRole.OWNER)
async def get_roles_catalog(
    request: Request,
    business_id: str = Query(..., alias="businessId"),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    catalog = await RoleService(db).get_catalog(_user_id(request), business_id)
    return success_response(data=catalog)


@roles_router.post("/")
@require_roles(PredefinedRole.OWNER)
async def create_role(
    request: Request,
    body: CreateRoleRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    role = await RoleService(db).create_role(
        _user_id(request),
        business_id=body.business_id,
        name=body.name,
        permissions=body.permissions,
        is_predefined=body.is_predefined,
    )
    return success_response(data=role, message="Role created successfully", code=201)


@roles_router.post("/predefined")
@require_roles(PredefinedRole.OWNER)
async def create_predefined_role(
    request: Request,
    body: CreatePredefinedRoleRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    role = await RoleService(db).create_predefined_role(
        _user_id(request), business_id=body.business_id, role=body.role
    )
    return success_response(data=role, message="Role created successfully", code=201)


@roles_router.post("/assign")
@require_roles(PredefinedRole.OWNER)
async def assign_role(
    request: Request,
    body: AssignRoleRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    result = await RoleService(db).assign_role(
        _user_id(request),
        user_id=body.user_id,
        role_id=body.role_id,
        business_id=body.business_id,
    )
    return success_response(data=result, message="Role assigned successfully")


@roles_router.get("/{role_id}")
@require_roles(PredefinedRole.OWNER)
async def get_role(
    request: Request,
    role_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    role = await RoleService(db).get_role(_user_id(request), role_id)
    return success_response(data=role)


@roles_router.put("/{role_id}")
@require_roles(PredefinedRole.OWNER)
async def update_role(
    request: Request,
    role_id: str,
    body: UpdateRoleRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    role = await RoleService(db).update_role(
        _user_id(request), role_id, name=body.name, permissions=body.permissions
    )
    return success_response(data=role, message="Role updated successfully")


@roles_router.put("/{role_id}/permissions")
@require_roles(PredefinedRole.OWNER)
async def update_role_permissions(
    request: Request,
    role_id: str,
    body: UpdateRolePermissionsRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    role = await RoleService(db).update_permissions(
        _user_id(request),
        role_id,
        permissions=body.permissions,
        business_id=body.business_id,
    )
    return success_response(data=role, message="Role permissions updated successfully")


@roles_router.delete("/{role_id}")
@require_roles(PredefinedRole.OWNER)
async def delete_role(
    request: Request,
    role_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    await RoleService(db).delete_role(_user_id(request), role_id)
    return success_response(message="Role deleted successfully")
