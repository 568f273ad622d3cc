"""
Permission catalog — the seeded, queryable list of valid section/permission pairs.

Collection: permission_sections (global)

    {
        "code": "shift_schedule",
        "title": "Shift & Schedule",
        "sort_order": 4,
        "permissions": [{"code": "view_schedule", "label": "View Schedule", "sort_order": 2}, ...]
    }

Custom-role permission blobs are validated against whatever is in the
collection at the time of the call; nothing is cached.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from shiftly.config.database import PERMISSION_SECTIONS, get_collection
from shiftly.utils import InvalidPermissionError, Logger
from .permissions import DEFAULT_CATALOG, normalize_section

logger = Logger("rbac")


class PermissionCatalog:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.sections = get_collection(db, PERMISSION_SECTIONS)

    async def get_catalog(self) -> dict:
        """Ordered sections, each with its ordered permissions."""
        cursor = self.sections.find({}).sort([("sort_order", 1), ("title", 1)])
        sections = []
        async for doc in cursor:
            perms = sorted(
                doc.get("permissions", []),
                key=lambda p: (p.get("sort_order", 0), p.get("label", "")),
            )
            sections.append(
                {
                    "id": doc["code"],
                    "title": doc.get("title", doc["code"]),
                    "permissions": [
                        {"id": p["code"], "label": p.get("label", p["code"])}
                        for p in perms
                    ],
                }
            )
        return {"sections": sections}

    async def allowed_map(self) -> dict[str, set[str]]:
        """section code → set of permission codes allowed in it."""
        catalog = await self.get_catalog()
        return {
            section["id"]: {p["id"] for p in section["permissions"]}
            for section in catalog["sections"]
        }

    async def validate(self, permissions: Optional[dict[str, Any]]) -> None:
        """
        Reject a permissions blob that names anything outside the catalog.

        Accepts section values as a list of codes or a {code: bool} map.
        Section keys may use camelCase aliases. Raises InvalidPermissionError
        naming the first offending section or code.
        """
        if permissions is None:
            return
        if not isinstance(permissions, dict):
            raise InvalidPermissionError(
                "Permissions must be an object keyed by section"
            )

        allowed_sections = await self.allowed_map()

        for section_key, actions in permissions.items():
            allowed = allowed_sections.get(normalize_section(section_key))
            if allowed is None:
                raise InvalidPermissionError(
                    f"Invalid permission section: {section_key}"
                )

            if isinstance(actions, list):
                for code in actions:
                    if not isinstance(code, str) or code not in allowed:
                        raise InvalidPermissionError(
                            f"Invalid permission: {section_key}.{code}"
                        )
            elif isinstance(actions, dict):
                for code, enabled in actions.items():
                    if not isinstance(enabled, bool):
                        raise InvalidPermissionError(
                            f"Permission value must be boolean for {section_key}.{code}"
                        )
                    if code not in allowed:
                        raise InvalidPermissionError(
                            f"Invalid permission: {section_key}.{code}"
                        )
            else:
                raise InvalidPermissionError(
                    f"Permissions for section {section_key} must be a list or an object"
                )

    async def sectioned_from_codes(self, codes: Iterable[str]) -> dict[str, list[str]]:
        """Group flat permission codes under the section the catalog places them in."""
        code_to_section: dict[str, str] = {}
        for section, perms in (await self.allowed_map()).items():
            for code in perms:
                code_to_section[code] = section

        sectioned: dict[str, set[str]] = {}
        for code in codes:
            section = code_to_section.get(code)
            if section is None:
                continue
            sectioned.setdefault(section, set()).add(code)
        return {section: sorted(perms) for section, perms in sectioned.items()}

    async def seed(self, sections: list[dict] = DEFAULT_CATALOG) -> int:
        """Upsert catalog sections by code. Returns the number of sections written."""
        now = datetime.now(timezone.utc)
        for section in sections:
            await self.sections.update_one(
                {"code": section["code"]},
                {
                    "$set": {
                        "title": section["title"],
                        "sort_order": section["sort_order"],
                        "permissions": section["permissions"],
                        "updated_at": now,
                    },
                    "$setOnInsert": {"created_at": now},
                },
                upsert=True,
            )
        logger.info(f"Permission catalog seeded ({len(sections)} sections)")
        return len(sections)
