"""
Centralized Test Configuration.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from globaltrack.app.main import app
from globaltrack.app.db.session import get_db, Base
from globaltrack.app.core.dependencies import ADMIN_SUBJECT, AdminCredentials, get_admin_credentials
from globaltrack.app.core.jwt import create_access_token
import globaltrack.app.core.token_revocation as token_revocation_module

ADMIN_USERNAME = "Admin"
ADMIN_PASSWORD = "S3cret!pass"

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# Mock Redis so token revocation works without a server
class MockRedis:
    def __init__(self):
        self.store = {}

    async def ping(self):
        return True

    async def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    async def exists(self, key):
        return 1 if key in self.store else 0

    async def flushdb(self):
        self.store = {}


@pytest.fixture
def mock_redis():
    return MockRedis()


@pytest.fixture(autouse=True)
def apply_overrides(mock_redis):
    """Point the app at the test database, the mock Redis and a known admin."""
    original_client = token_revocation_module.redis_client
    token_revocation_module.redis_client = mock_redis

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_admin_credentials] = lambda: AdminCredentials(ADMIN_USERNAME, ADMIN_PASSWORD)
    yield

    app.dependency_overrides = {}
    token_revocation_module.redis_client = original_client


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def admin_token():
    return create_access_token(data={"sub": ADMIN_SUBJECT, "username": ADMIN_USERNAME})


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def shipment_payload():
    """Factory for a valid create-shipment body; keyword overrides replace top-level keys."""
    def build(**overrides):
        now = datetime.now(timezone.utc)
        payload = {
            "shipmentType": "express",
            "shipmentDate": (now - timedelta(days=1)).isoformat(),
            "estimatedDelivery": (now + timedelta(days=4)).isoformat(),
            "weight": 2.5,
            "dimensions": "30x20x10 cm",
            "packageDescription": "Books",
            "sender": {
                "name": "Alice Sender",
                "company": "Paper Co",
                "email": "alice@globaltrack.io",
                "phone": "+1-555-0100",
            },
            "receiver": {
                "name": "Bob Receiver",
                "email": "bob@globaltrack.io",
                "phone": "+234-800-0199",
                "address": {"city": "Lagos", "country": "Nigeria", "zipCode": "100001"},
            },
            "origin": {"latitude": 40.7128, "longitude": -74.006, "name": "New York"},
            "destination": {"latitude": 6.5244, "longitude": 3.3792, "name": "Lagos"},
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def create_shipment(client, auth_headers, shipment_payload):
    """Create a shipment through the API and return its JSON representation."""
    async def create(**overrides):
        response = await client.post(
            "/api/tracking/",
            json=shipment_payload(**overrides),
            headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return create
