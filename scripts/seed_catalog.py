"""
Seed (or refresh) the permission catalog.

    python scripts/seed_catalog.py

Sections are upserted by code, so running it again only refreshes titles,
labels and ordering.
"""

import asyncio
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from shiftly.config import db_manager, ensure_indexes, settings
from shiftly.rbac import PermissionCatalog


async def main() -> None:
    await db_manager.connect()
    try:
        await ensure_indexes(db_manager.database)
        count = await PermissionCatalog(db_manager.database).seed()
    finally:
        db_manager.close()

    print(f"OK: Seeded {count} permission sections -> {settings.database_name}")


if __name__ == "__main__":
    asyncio.run(main())
