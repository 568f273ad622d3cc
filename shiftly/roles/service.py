"""
Role service — custom roles owned by a business.

Collection: roles (global, unique on business_id + name)

    {
        "business_id": "<business id>",
        "name": "HR / Recruiter",
        "permissions": {"people_management": ["manage_team_members", ...]},
        "is_predefined": false
    }

Every operation is restricted to the owner of the role's business. Permission
blobs are validated against the catalog and stored in canonical form.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from shiftly.businesses.service import BusinessService
from shiftly.config.database import MEMBERSHIPS, ROLES, get_collection
from shiftly.rbac.blobs import canonicalize
from shiftly.rbac.catalog import PermissionCatalog
from shiftly.rbac.resolver import ROLE_KIND_CUSTOM, ROLE_KIND_PREDEFINED
from shiftly.rbac.roles import (
    ROLE_LABELS,
    PredefinedRole,
    format_custom_role_name,
    is_predefined_role,
    normalize_role_code,
    permissions_for,
    role_label,
)
from shiftly.utils import (
    BadRequestError,
    ConflictError,
    Logger,
    NotFoundError,
    parse_object_id,
)

logger = Logger("roles")

DUPLICATE_NAME = "Role with this name already exists"


def _role_out(role: dict, with_created: bool = False) -> dict:
    out = {
        "id": str(role["_id"]),
        "name": role["name"],
        "permissions": role.get("permissions"),
        "isPredefined": role.get("is_predefined", False),
    }
    if with_created and role.get("created_at"):
        out["createdAt"] = role["created_at"].isoformat()
    return out


class RoleService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.roles = get_collection(db, ROLES)
        self.memberships = get_collection(db, MEMBERSHIPS)
        self.catalog = PermissionCatalog(db)
        self.businesses = BusinessService(db)

    # ── helpers ──────────────────────────────────────────────────

    async def _get_owned_role(self, user_id: str, role_id: str) -> dict:
        role = await self.roles.find_one({"_id": parse_object_id(role_id, "role ID")})
        if not role:
            raise NotFoundError("Role not found")
        await self.businesses.get_owned_business(user_id, role["business_id"])
        return role

    async def _ensure_name_free(self, business_id: str, name: str) -> None:
        if is_predefined_role(name):
            raise BadRequestError(
                f"Role name '{name}' is reserved for the predefined role"
            )
        if await self.roles.find_one({"business_id": business_id, "name": name}):
            raise ConflictError(DUPLICATE_NAME)

    async def _insert(self, doc: dict) -> dict:
        try:
            result = await self.roles.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError(DUPLICATE_NAME)
        doc["_id"] = result.inserted_id
        return doc

    async def _list_docs(self, business_id: str) -> list[dict]:
        cursor = self.roles.find({"business_id": business_id}).sort("created_at", -1)
        return [r async for r in cursor]

    # ── queries ──────────────────────────────────────────────────

    async def list_roles(self, user_id: str, business_id: str) -> list[dict]:
        business = await self.businesses.get_owned_business(user_id, business_id)
        docs = await self._list_docs(str(business["_id"]))
        return [_role_out(r, with_created=True) for r in docs]

    async def get_catalog(self, user_id: str, business_id: str) -> dict:
        """Predefined role ids, this business's custom roles, and the permission catalog."""
        business = await self.businesses.get_owned_business(user_id, business_id)
        catalog = await self.catalog.get_catalog()
        docs = await self._list_docs(str(business["_id"]))
        return {
            "predefinedRoles": [
                {"id": role.value, "label": role_label(role.value)}
                for role in PredefinedRole
            ],
            "customRoles": [_role_out(r) for r in docs],
            "permissionSections": catalog["sections"],
        }

    async def get_role(self, user_id: str, role_id: str) -> dict:
        return _role_out(await self._get_owned_role(user_id, role_id))

    # ── mutations ────────────────────────────────────────────────

    async def create_role(
        self,
        user_id: str,
        business_id: str,
        name: str,
        permissions: Optional[dict[str, Any]] = None,
        is_predefined: bool = False,
    ) -> dict:
        business = await self.businesses.get_owned_business(user_id, business_id)
        business_id = str(business["_id"])

        await self._ensure_name_free(business_id, name)
        await self.catalog.validate(permissions)

        now = datetime.now(timezone.utc)
        role = await self._insert(
            {
                "business_id": business_id,
                "name": name,
                "permissions": canonicalize(permissions),
                "is_predefined": is_predefined,
                "created_at": now,
                "updated_at": now,
            }
        )
        logger.info(f"Role '{name}' created in business {business_id}")
        return _role_out(role)

    async def create_predefined_role(
        self, user_id: str, business_id: str, role: str
    ) -> dict:
        """
        Materialize a predefined role as a role document of the business.

        'manager' / 'Manager' / 'MANAGER' all resolve to the predefined role
        and produce a role named 'Manager' holding its static permissions,
        grouped by catalog section. Anything else becomes an empty role with
        a display-formatted name.
        """
        business = await self.businesses.get_owned_business(user_id, business_id)
        business_id = str(business["_id"])

        code = normalize_role_code(role)
        if code in ROLE_LABELS:
            name = role_label(code)
            permissions = await self.catalog.sectioned_from_codes(permissions_for(code))
        else:
            name = format_custom_role_name(role)
            permissions = {}

        if not name:
            raise BadRequestError("Role name cannot be blank")

        await self._ensure_name_free(business_id, name)
        await self.catalog.validate(permissions)

        now = datetime.now(timezone.utc)
        doc = await self._insert(
            {
                "business_id": business_id,
                "name": name,
                "permissions": canonicalize(permissions),
                "is_predefined": True,
                "created_at": now,
                "updated_at": now,
            }
        )
        logger.info(f"Predefined role '{name}' created in business {business_id}")
        return _role_out(doc)

    async def update_role(
        self,
        user_id: str,
        role_id: str,
        name: Optional[str] = None,
        permissions: Optional[dict[str, Any]] = None,
    ) -> dict:
        role = await self._get_owned_role(user_id, role_id)
        business_id = role["business_id"]

        renamed = bool(name) and name != role["name"]
        if renamed:
            await self._ensure_name_free(business_id, name)

        await self.catalog.validate(permissions)

        changes: dict = {"updated_at": datetime.now(timezone.utc)}
        if renamed:
            changes["name"] = name
        if permissions is not None:
            changes["permissions"] = canonicalize(permissions)

        try:
            updated = await self.roles.find_one_and_update(
                {"_id": role["_id"]},
                {"$set": changes},
                return_document=True,
            )
        except DuplicateKeyError:
            raise ConflictError(DUPLICATE_NAME)

        if renamed:
            await self._rename_memberships(role, name)

        logger.info(f"Role {role_id} updated in business {business_id}")
        return _role_out(updated)

    async def _rename_memberships(self, role: dict, new_name: str) -> None:
        """Keep the role string of memberships holding this role in step with its name."""
        result = await self.memberships.update_many(
            {
                "business_id": role["business_id"],
                "$or": [
                    {"role_id": str(role["_id"])},
                    {"role": role["name"], "role_kind": {"$ne": ROLE_KIND_PREDEFINED}},
                ],
            },
            {
                "$set": {
                    "role": new_name,
                    "role_kind": ROLE_KIND_CUSTOM,
                    "role_id": str(role["_id"]),
                }
            },
        )
        if result.modified_count:
            logger.info(
                f"Renamed role on {result.modified_count} membership(s): "
                f"'{role['name']}' -> '{new_name}'"
            )

    async def delete_role(self, user_id: str, role_id: str) -> None:
        role = await self._get_owned_role(user_id, role_id)

        in_use = await self.memberships.count_documents(
            {
                "business_id": role["business_id"],
                "$or": [{"role_id": str(role["_id"])}, {"role": role["name"]}],
            }
        )
        if in_use > 0:
            raise BadRequestError(
                f"Cannot delete role that is assigned to {in_use} user(s)"
            )

        await self.roles.delete_one({"_id": role["_id"]})
        logger.info(f"Role '{role['name']}' deleted from business {role['business_id']}")

    async def update_permissions(
        self,
        user_id: str,
        role_identifier: str,
        permissions: dict[str, Any],
        business_id: Optional[str] = None,
    ) -> dict:
        """
        Replace a role's permission blob wholesale.

        `role_identifier` is a role id, or, together with `business_id`, a
        role name in any of the spellings the catalog endpoints hand out
        ('housekeeping_staff', 'Housekeeping Staff', ...).
        """
        role = None
        if ObjectId.is_valid(role_identifier):
            role = await self.roles.find_one({"_id": ObjectId(role_identifier)})

        if role is None and business_id:
            role = await self._find_by_name(business_id, role_identifier)

        if role is None:
            raise NotFoundError("Role not found")

        await self.businesses.get_owned_business(user_id, role["business_id"])
        await self.catalog.validate(permissions)

        updated = await self.roles.find_one_and_update(
            {"_id": role["_id"]},
            {
                "$set": {
                    "permissions": canonicalize(permissions),
                    "updated_at": datetime.now(timezone.utc),
                }
            },
            return_document=True,
        )
        logger.info(f"Permissions replaced on role '{role['name']}'")
        return _role_out(updated)

    async def _find_by_name(self, business_id: str, identifier: str) -> Optional[dict]:
        candidates = {identifier.lower(), format_custom_role_name(identifier).lower()}
        code = normalize_role_code(identifier)
        if code in ROLE_LABELS:
            candidates.add(role_label(code).lower())

        async for role in self.roles.find({"business_id": business_id}):
            if role["name"].lower() in candidates:
                return role
        return None

    async def assign_role(
        self, owner_id: str, user_id: str, role_id: str, business_id: str
    ) -> dict:
        business = await self.businesses.get_owned_business(owner_id, business_id)
        business_id = str(business["_id"])

        role = await self.roles.find_one(
            {"_id": parse_object_id(role_id, "role ID"), "business_id": business_id}
        )
        if not role:
            raise NotFoundError("Role not found")

        membership = await self.memberships.find_one(
            {"user_id": user_id, "business_id": business_id}
        )
        if not membership:
            raise NotFoundError("User is not part of this business")

        # Legacy documents may carry a predefined id as their name
        if is_predefined_role(role["name"]):
            tag = {"role_kind": ROLE_KIND_PREDEFINED, "role_id": None}
        else:
            tag = {"role_kind": ROLE_KIND_CUSTOM, "role_id": str(role["_id"])}

        await self.memberships.update_one(
            {"_id": membership["_id"]},
            {"$set": {"role": role["name"], **tag}},
        )
        logger.info(f"Role '{role['name']}' assigned to user {user_id} in {business_id}")
        return {"userId": user_id, "role": role["name"], "businessId": business_id}
