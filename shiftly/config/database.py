from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from shiftly.utils.logger import Logger
from .settings import settings

logger = Logger("database")

# ── Collection names ─────────────────────────────────────────────
USERS = "users"
BUSINESSES = "businesses"
MEMBERSHIPS = "user_businesses"
ROLES = "roles"
PERMISSION_SECTIONS = "permission_sections"


class DatabaseManager:
    """MongoDB connection manager — true singleton."""

    _instance = None
    _client: AsyncIOMotorClient | None = None
    _database: AsyncIOMotorDatabase | None = None
    _connected: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    async def connect(self) -> None:
        if self._connected:
            return
        try:
            self._client = AsyncIOMotorClient(settings.mongodb_uri)
            self._database = self._client[settings.database_name]
            await self._client.admin.command("ping")
            self._connected = True
            logger.info(f"Connected to MongoDB [{settings.database_name}]")
        except Exception as e:
            self._connected = False
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._connected = False
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._database

    @property
    def is_connected(self) -> bool:
        return self._connected


# ── Module-level singleton ──────────────────────────────────────
db_manager = DatabaseManager()


async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency — returns the database instance."""
    if not db_manager.is_connected:
        await db_manager.connect()
    return db_manager.database


def get_collection(
    db: AsyncIOMotorDatabase,
    collection_name: str,
) -> AsyncIOMotorCollection:
    """Return a collection by name. Collections are global and scoped by ``business_id``."""
    return db[collection_name]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the unique indexes the services rely on."""
    await db[USERS].create_index("email", unique=True)
    await db[ROLES].create_index([("business_id", 1), ("name", 1)], unique=True)
    await db[MEMBERSHIPS].create_index(
        [("user_id", 1), ("business_id", 1)], unique=True
    )
    await db[PERMISSION_SECTIONS].create_index("code", unique=True)
