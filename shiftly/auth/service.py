"""Authentication service — signup, login and the current-user view."""

from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from shiftly.config.database import BUSINESSES, MEMBERSHIPS, USERS, get_collection
from shiftly.utils import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    Logger,
    NotFoundError,
    parse_object_id,
    serialize_mongo_doc,
)
from .helpers import hash_password, verify_password, create_access_token

logger = Logger("auth")


def _public_user(doc: dict) -> dict:
    safe = serialize_mongo_doc(doc)
    safe.pop("password", None)
    return safe


class AuthService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users = get_collection(db, USERS)

    async def signup(self, email: str, full_name: str, password: str) -> dict:
        """Create a user account. Email is stored lower-cased and must be unique."""
        email = email.lower()
        if await self.users.find_one({"email": email}):
            raise ConflictError("User with this email already exists")

        now = datetime.now(timezone.utc)
        user_doc = {
            "email": email,
            "full_name": full_name,
            "password": hash_password(password),
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = await self.users.insert_one(user_doc)
        except DuplicateKeyError:
            raise ConflictError("User with this email already exists")
        user_doc["_id"] = result.inserted_id

        logger.info(f"User signed up: {email}")
        return _public_user(user_doc)

    async def authenticate(self, email: str, password: str) -> dict:
        """
        1. Find the user by email.
        2. Verify active flag and password.
        3. Return JWT + user data.
        """
        user = await self.users.find_one({"email": email.lower()})
        if not user or not verify_password(password, user.get("password", "")):
            raise AuthenticationError("Invalid credentials")

        if not user.get("is_active", True):
            raise ForbiddenError("Account is deactivated")

        token = create_access_token(
            data={"sub": str(user["_id"]), "email": user["email"]}
        )

        await self.users.update_one(
            {"_id": user["_id"]},
            {"$set": {"last_login": datetime.now(timezone.utc)}},
        )

        return {
            "access_token": token,
            "token_type": "bearer",
            "user": _public_user(user),
        }

    async def me(self, user_id: str) -> dict:
        """Current user with every business membership it holds."""
        user = await self.users.find_one({"_id": parse_object_id(user_id, "user ID")})
        if not user:
            raise NotFoundError("User not found")

        memberships = get_collection(self.db, MEMBERSHIPS)
        businesses = get_collection(self.db, BUSINESSES)

        entries = []
        async for m in memberships.find({"user_id": user_id}):
            business = await businesses.find_one(
                {"_id": parse_object_id(m["business_id"], "business ID")}
            )
            entries.append(
                {
                    "business_id": m["business_id"],
                    "business_name": business.get("name") if business else None,
                    "role": m.get("role"),
                }
            )

        data = _public_user(user)
        data["memberships"] = entries
        return data
