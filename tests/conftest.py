"""
Test configuration and fixtures for pytest.
Each test gets its own in-memory MongoDB and an app bound to it.
"""
import asyncio
import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from backoffice.config import Settings
from backoffice.database import Collections, Database
from backoffice.main import create_app
from backoffice.models import SessionUser
from backoffice.repositories import SalaryRepository


@pytest.fixture
def settings():
    """Local (non-serverless) settings without a MongoDB URI."""
    return Settings(DB_NAME=f"test_{uuid.uuid4().hex[:8]}", SESSION_SECRET="test-secret")


@pytest.fixture
async def database(settings):
    """Connected in-memory database."""
    db = Database(settings)
    await db.connect()
    yield db
    await db.close()


@pytest.fixture
def salary_repo(database):
    return SalaryRepository(database.get_db()[Collections.SALARIES])


@pytest.fixture
def manager():
    return SessionUser(name="Manager")


@pytest.fixture
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest.fixture
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
async def lenient_client(app):
    """Client that receives the 500 response instead of the re-raised app error."""
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
async def logged_in_client(client):
    """Client with an operator named "Manager" in its session."""
    response = await client.post("/login", data={"name": "Manager"})
    assert response.status_code == 302
    return client


class FakeMotorClient:
    """Motor client double backed by mongomock, with a controllable ping."""

    def __init__(self, uri, options, ping_error=None, ping_delay=0.0):
        self.uri = uri
        self.options = options
        self.closed = False
        self._backing = AsyncMongoMockClient()

        async def command(name):
            await asyncio.sleep(ping_delay)
            if ping_error is not None:
                raise ping_error
            return {"ok": 1.0}

        self.admin = SimpleNamespace(command=AsyncMock(side_effect=command))

    def __getitem__(self, name):
        return self._backing[name]

    def close(self):
        self.closed = True


@pytest.fixture
def client_factory():
    """
    Build Motor client factories for Database(client_factory=...).

    Usage:
        factory = client_factory(ping_delay=0.05)
        database = Database(settings, client_factory=factory)
        factory.created  # every client built so far
    """
    def make(ping_error=None, ping_delay=0.0):
        created = []

        def factory(uri, **options):
            client = FakeMotorClient(uri, options, ping_error, ping_delay)
            created.append(client)
            return client

        factory.created = created
        return factory

    return make
