"""
Permission resolver — request-time authorization across memberships.

For a user and an optional target business:
  1. No requirement declared         → allow
  2. Load memberships (one business, or all of them)
  3. No memberships                  → forbidden
  4. Required roles                  → some membership's role string must match
  5. Required permissions            → union of every membership's grants:
       predefined role → static list from ROLE_PERMISSIONS
       custom role     → permissions blob of the role document
  6. Every required code present     → allow, otherwise forbidden

Membership documents carry a `role_kind` tag ("predefined" | "custom") set
when the role was assigned. Older documents without the tag are classified
by testing the role string against the predefined identifiers.

Nothing is cached: an edited role takes effect on the next request.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from shiftly.config.database import MEMBERSHIPS, ROLES, get_collection
from shiftly.utils import ForbiddenError, Logger
from .blobs import parse_permission_blob
from .roles import is_predefined_role, permissions_for

logger = Logger("rbac")

ROLE_KIND_PREDEFINED = "predefined"
ROLE_KIND_CUSTOM = "custom"


@dataclass(frozen=True)
class Requirement:
    """What a route demands: all of `permissions`, and any one of `roles`."""

    permissions: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()

    @classmethod
    def of(
        cls,
        permissions: Optional[Iterable[Any]] = None,
        roles: Optional[Iterable[Any]] = None,
    ) -> "Requirement":
        def _values(items):
            return tuple(getattr(i, "value", i) for i in (items or ()))

        return cls(permissions=_values(permissions), roles=_values(roles))

    @property
    def is_empty(self) -> bool:
        return not self.permissions and not self.roles


def role_kind_of(membership: dict) -> str:
    """
    Predefined exactly when the role string is a predefined id.

    The stored `role_kind` tag never overrides this; custom memberships use
    their `role_id` to find the role document.
    """
    if is_predefined_role(membership.get("role")):
        return ROLE_KIND_PREDEFINED
    return ROLE_KIND_CUSTOM


def resolve_business_id(
    body: Any = None,
    query: Optional[dict] = None,
    path: Optional[dict] = None,
) -> Optional[str]:
    """Target business from the request: body, then query string, then path."""
    if body is not None:
        if isinstance(body, dict):
            value = body.get("business_id") or body.get("businessId")
        else:
            value = getattr(body, "business_id", None)
        if value:
            return str(value)
    for source in (query or {}, path or {}):
        value = source.get("businessId") or source.get("business_id")
        if value:
            return str(value)
    return None


class PermissionResolver:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.memberships_col = get_collection(db, MEMBERSHIPS)
        self.roles = get_collection(db, ROLES)

    async def memberships(
        self, user_id: str, business_id: Optional[str] = None
    ) -> list[dict]:
        filters: dict = {"user_id": user_id}
        if business_id:
            filters["business_id"] = business_id
        return [m async for m in self.memberships_col.find(filters)]

    async def _custom_role(self, membership: dict) -> Optional[dict]:
        role_id = membership.get("role_id")
        if role_id and ObjectId.is_valid(str(role_id)):
            doc = await self.roles.find_one(
                {"_id": ObjectId(str(role_id)), "business_id": membership["business_id"]}
            )
            if doc:
                return doc
        # Untagged (or dangling) memberships fall back to the name lookup
        return await self.roles.find_one(
            {"business_id": membership["business_id"], "name": membership["role"]}
        )

    async def permissions_for_membership(self, membership: dict) -> set[str]:
        role = membership.get("role")
        if not role:
            return set()

        if role_kind_of(membership) == ROLE_KIND_PREDEFINED:
            return set(permissions_for(role))

        doc = await self._custom_role(membership)
        if doc is None:
            logger.debug(
                f"No custom role '{role}' in business {membership.get('business_id')}"
            )
            return set()
        return parse_permission_blob(doc.get("permissions")).codes()

    async def effective_permissions(
        self, user_id: str, business_id: Optional[str] = None
    ) -> set[str]:
        granted: set[str] = set()
        for membership in await self.memberships(user_id, business_id):
            granted |= await self.permissions_for_membership(membership)
        return granted

    async def authorize(
        self,
        user_id: Optional[str],
        requirement: Requirement,
        business_id: Optional[str] = None,
    ) -> list[dict]:
        """
        Raise ForbiddenError unless the user satisfies `requirement`.

        Returns the memberships the decision was made on.
        """
        if requirement.is_empty:
            return []

        if not user_id:
            raise ForbiddenError("User not authenticated")

        memberships = await self.memberships(user_id, business_id)
        if not memberships:
            self._deny(user_id, business_id, "no membership")
            raise ForbiddenError("User is not associated with any business")

        if requirement.roles:
            held = {m.get("role") for m in memberships if m.get("role")}
            if not any(role in held for role in requirement.roles):
                self._deny(user_id, business_id, f"roles {sorted(held)}")
                raise ForbiddenError(
                    f"User must have one of these roles: {', '.join(requirement.roles)}"
                )

        if requirement.permissions:
            granted: set[str] = set()
            for membership in memberships:
                granted |= await self.permissions_for_membership(membership)

            missing = [p for p in requirement.permissions if p not in granted]
            if missing:
                self._deny(user_id, business_id, f"missing {missing}")
                raise ForbiddenError(
                    f"Missing required permissions: {', '.join(missing)}"
                )

        return memberships

    @staticmethod
    def _deny(user_id: str, business_id: Optional[str], reason: str) -> None:
        scope = business_id or "all businesses"
        logger.warning(f"Access denied for user {user_id} in {scope}: {reason}")
