from fastapi import APIRouter, Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from shiftly.config import get_database
from shiftly.utils import success_response
from .schemas import LoginRequest, SignupRequest
from .service import AuthService

auth_router = APIRouter()


@auth_router.post("/signup")
async def signup(
    body: SignupRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Create an account. Businesses and roles are attached afterwards."""
    svc = AuthService(db)
    user = await svc.signup(body.email, body.full_name, body.password)
    return success_response(data=user, message="Signup successful", code=201)


@auth_router.post("/login")
async def login(
    body: LoginRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Authenticate user and return JWT + user data."""
    svc = AuthService(db)
    result = await svc.authenticate(email=body.email, password=body.password)
    return success_response(data=result, message="Login successful")


@auth_router.get("/me")
async def me(
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    svc = AuthService(db)
    user = await svc.me(request.state.user["id"])
    return success_response(data=user)
