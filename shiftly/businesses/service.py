"""
Business service — tenants and the memberships that scope every permission check.

Collections:
    businesses        {name, owner_id, description}
    user_businesses   {user_id, business_id, role, role_kind, role_id}
"""

from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from shiftly.config.database import (
    BUSINESSES,
    MEMBERSHIPS,
    ROLES,
    USERS,
    get_collection,
)
from shiftly.rbac.resolver import ROLE_KIND_CUSTOM, ROLE_KIND_PREDEFINED
from shiftly.rbac.roles import PredefinedRole, is_predefined_role
from shiftly.utils import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    Logger,
    NotFoundError,
    parse_object_id,
    serialize_mongo_doc,
)

logger = Logger("businesses")


class BusinessService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.businesses = get_collection(db, BUSINESSES)
        self.memberships = get_collection(db, MEMBERSHIPS)
        self.roles = get_collection(db, ROLES)
        self.users = get_collection(db, USERS)

    async def get_owned_business(self, user_id: str, business_id: str) -> dict:
        """The business, if `user_id` owns it. 404 otherwise."""
        if not business_id:
            raise BadRequestError("businessId is required")
        business = await self.businesses.find_one(
            {"_id": parse_object_id(business_id, "business ID"), "owner_id": user_id}
        )
        if not business:
            raise NotFoundError("Business not found or you do not have permission")
        return business

    async def create_business(
        self, owner_id: str, name: str, description: Optional[str] = None
    ) -> dict:
        """Create a business and make its creator the owner member."""
        now = datetime.now(timezone.utc)
        business_doc = {
            "name": name,
            "description": description,
            "owner_id": owner_id,
            "created_at": now,
            "updated_at": now,
        }
        result = await self.businesses.insert_one(business_doc)
        business_doc["_id"] = result.inserted_id

        await self.memberships.insert_one(
            {
                "user_id": owner_id,
                "business_id": str(result.inserted_id),
                "role": PredefinedRole.OWNER.value,
                "role_kind": ROLE_KIND_PREDEFINED,
                "role_id": None,
                "created_at": now,
            }
        )

        logger.info(f"Business '{name}' created by {owner_id}")
        return serialize_mongo_doc(business_doc)

    async def list_for_user(self, user_id: str) -> list[dict]:
        out = []
        async for m in self.memberships.find({"user_id": user_id}):
            business = await self.businesses.find_one(
                {"_id": parse_object_id(m["business_id"], "business ID")}
            )
            if not business:
                continue
            entry = serialize_mongo_doc(business)
            entry["role"] = m.get("role")
            out.append(entry)
        return out

    async def list_members(self, business_id: str) -> list[dict]:
        members = []
        cursor = self.memberships.find({"business_id": business_id}).sort("created_at", 1)
        async for m in cursor:
            user = await self.users.find_one(
                {"_id": parse_object_id(m["user_id"], "user ID")}
            )
            members.append(
                {
                    "user_id": m["user_id"],
                    "full_name": user.get("full_name") if user else None,
                    "email": user.get("email") if user else None,
                    "role": m.get("role"),
                    "role_kind": m.get("role_kind"),
                }
            )
        return members

    async def _role_tag(self, business_id: str, role: str) -> dict:
        """Classify a role string once, at assignment time. Unknown roles are a 400."""
        if is_predefined_role(role):
            return {"role": role, "role_kind": ROLE_KIND_PREDEFINED, "role_id": None}

        custom = await self.roles.find_one({"business_id": business_id, "name": role})
        if not custom:
            raise BadRequestError(
                f"Unknown role '{role}': not a predefined role or a role of this business"
            )
        return {
            "role": custom["name"],
            "role_kind": ROLE_KIND_CUSTOM,
            "role_id": str(custom["_id"]),
        }

    async def add_member(
        self, caller_id: str, business_id: str, user_id: str, role: str
    ) -> dict:
        """Add `user_id` to the business. Only the owner may grant the owner role."""
        business = await self.businesses.find_one(
            {"_id": parse_object_id(business_id, "business ID")}
        )
        if not business:
            raise NotFoundError("Business not found")
        if role == PredefinedRole.OWNER.value and business.get("owner_id") != caller_id:
            logger.warning(
                f"User {caller_id} tried to add an owner to business {business_id}"
            )
            raise ForbiddenError("Only the business owner can add owners")
        if not await self.users.find_one({"_id": parse_object_id(user_id, "user ID")}):
            raise NotFoundError("User not found")

        if await self.memberships.find_one(
            {"user_id": user_id, "business_id": business_id}
        ):
            raise ConflictError("User is already a member of this business")

        tag = await self._role_tag(business_id, role)
        doc = {
            "user_id": user_id,
            "business_id": business_id,
            **tag,
            "created_at": datetime.now(timezone.utc),
        }
        result = await self.memberships.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"User {user_id} joined business {business_id} as '{tag['role']}'")
        return serialize_mongo_doc(doc)
