from __future__ import annotations

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from shiftly.app import create_app
from shiftly.config import get_database
from shiftly.rbac import PermissionCatalog


@pytest.fixture
def db():
    return AsyncMongoMockClient()["shiftly_test"]


@pytest.fixture
async def catalog(db):
    catalog = PermissionCatalog(db)
    await catalog.seed()
    return catalog


@pytest.fixture
def app(db):
    application = create_app(use_lifespan=False)

    async def _db_override():
        return db

    application.dependency_overrides[get_database] = _db_override
    return application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
