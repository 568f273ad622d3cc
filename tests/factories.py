"""Document builders for tests: insert rows directly, bypassing the services."""

from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId

from shiftly.auth.helpers import create_access_token
from shiftly.config.database import BUSINESSES, MEMBERSHIPS, ROLES, USERS


def auth_headers(user_id: str, email: str = "someone@example.com") -> dict:
    token = create_access_token({"sub": user_id, "email": email})
    return {"Authorization": f"Bearer {token}"}


async def make_user(db, email: str, full_name: str = "Test User") -> str:
    now = datetime.now(timezone.utc)
    result = await db[USERS].insert_one(
        {
            "email": email,
            "full_name": full_name,
            "password": "not-a-real-hash",
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
    )
    return str(result.inserted_id)


async def make_business(db, owner_id: str, name: str = "Blue Lagoon Bistro") -> str:
    now = datetime.now(timezone.utc)
    result = await db[BUSINESSES].insert_one(
        {"name": name, "owner_id": owner_id, "created_at": now, "updated_at": now}
    )
    business_id = str(result.inserted_id)
    await add_membership(db, owner_id, business_id, "owner")
    return business_id


async def add_membership(db, user_id: str, business_id: str, role: str, **extra) -> None:
    await db[MEMBERSHIPS].insert_one(
        {
            "user_id": user_id,
            "business_id": business_id,
            "role": role,
            "created_at": datetime.now(timezone.utc),
            **extra,
        }
    )


async def make_role(db, business_id: str, name: str, permissions) -> str:
    result = await db[ROLES].insert_one(
        {
            "business_id": business_id,
            "name": name,
            "permissions": permissions,
            "is_predefined": False,
            "created_at": datetime.now(timezone.utc),
        }
    )
    return str(result.inserted_id)


def random_id() -> str:
    return str(ObjectId())
