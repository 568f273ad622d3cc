"""
Business Routes.

Endpoints:
    POST   /                          Create a business (caller becomes owner)
    GET    /                          Businesses the caller belongs to
    GET    /{business_id}/members     List members     (view_employee_profiles)
    POST   /{business_id}/members     Add a member     (manage_team_members)
"""

from fastapi import APIRouter, Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from shiftly.config import get_database
from shiftly.rbac import Permission, require_permissions
from shiftly.utils import success_response
from .schemas import AddMemberRequest, CreateBusinessRequest
from .service import BusinessService

businesses_router = APIRouter()


@businesses_router.post("/")
async def create_business(
    request: Request,
    body: CreateBusinessRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    svc = BusinessService(db)
    business = await svc.create_business(
        owner_id=request.state.user["id"],
        name=body.name,
        description=body.description,
    )
    return success_response(data=business, message="Business created", code=201)


@businesses_router.get("/")
async def list_my_businesses(
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    svc = BusinessService(db)
    businesses = await svc.list_for_user(request.state.user["id"])
    return success_response(data=businesses)


@businesses_router.get("/{business_id}/members")
@require_permissions(Permission.VIEW_EMPLOYEE_PROFILES)
async def list_members(
    request: Request,
    business_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    svc = BusinessService(db)
    members = await svc.list_members(business_id)
    return success_response(data=members)


@businesses_router.post("/{business_id}/members")
@require_permissions(Permission.MANAGE_TEAM_MEMBERS)
async def add_member(
    request: Request,
    business_id: str,
    body: AddMemberRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    svc = BusinessService(db)
    member = await svc.add_member(
        request.state.user["id"], business_id, body.user_id, body.role
    )
    return success_response(data=member, message="Member added", code=201)
