"""
Product Store — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── fake_collection: In-memory stand-in for the products collection
    ├── fake_session:    Stand-in client session that records being ended
    ├── store_session:   StoreSession over the two fakes (service tests)
    ├── mock_db:         StoreSession over MagicMock/AsyncMock (driver-call tests)
    ├── app:             Fresh FastAPI app with get_db_session overridden
    └── test_client:     HTTPX AsyncClient for API endpoint testing

No test talks to a real MongoDB. ASGITransport does not run the lifespan,
so the app never opens a client unless a test sets one on app.state.
"""

import os

# Override settings before any productstore import reads them
os.environ["MONGO_URI"] = "mongodb://localhost:27017"
os.environ["MONGO_DATABASE"] = "store_test"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from productstore.database import StoreSession, get_db_session
from productstore.main import create_app
from tests.fakes import FakeCollection, FakeSession


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def store_session(fake_collection, fake_session):
    return StoreSession(collection=fake_collection, session=fake_session)


@pytest.fixture
def mock_db():
    """
    StoreSession whose collection is a MagicMock.

    Usage:
        mock_db.collection.find_one.return_value = {"id": "1", "name": "x", "price": "1"}
        result = await service.get_product(mock_db, "1")
    """
    collection = MagicMock()
    collection.find_one = AsyncMock()
    collection.insert_one = AsyncMock()
    collection.replace_one = AsyncMock()
    collection.delete_one = AsyncMock()
    return StoreSession(collection=collection, session=MagicMock(name="session"))


@pytest.fixture
def app(fake_collection, fake_session):
    """The real app, with the per-request session served from the fakes."""
    application = create_app()

    async def override_get_db_session():
        try:
            yield StoreSession(collection=fake_collection, session=fake_session)
        finally:
            await fake_session.end_session()

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the app.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/products")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
