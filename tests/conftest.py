"""
Test configuration and fixtures for the estate listing API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os
import tempfile

# Configure the app for tests before it is imported
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="estate-uploads-"))
os.environ.setdefault("PUBLIC_BASE_URL", "http://testserver")

import io
import uuid
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.datastructures import Headers, UploadFile

from estate_api.config import Settings, get_settings
from estate_api.database import Base, build_engine, get_db
from estate_api.main import app, create_app
from estate_api.models import Property, User, UserType
from estate_api.repositories.property import PropertyRepository
from estate_api.repositories.user import UserRepository
from estate_api.services.auth import AuthService
from estate_api.services.property import PropertyService
from estate_api.services.upload import UploadService


TEST_DATABASE_URL = os.environ["DATABASE_URL"]
TEST_PASSWORD = "testpassword123"
ALLOWED_ORIGIN = "http://localhost:3000"


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = build_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def app_client(session_factory):
    """
    Build an app from explicit settings and open a client against it.

    Yields ``(app, client)``; the app shares the per-test database.
    """
    @asynccontextmanager
    async def _open(settings: Settings, configure=None):
        custom_app = create_app(settings)
        if configure is not None:
            configure(custom_app)

        async def override_get_db():
            async with session_factory() as session:
                yield session

        custom_app.dependency_overrides[get_db] = override_get_db

        transport = ASGITransport(app=custom_app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield custom_app, client

        await custom_app.state.engine.dispose()

    return _open


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


# Service fixtures
@pytest.fixture
def upload_service(settings) -> UploadService:
    return UploadService(settings)


@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession, upload_service: UploadService) -> PropertyService:
    return PropertyService(db_session, upload_service)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def registration_payload(
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User",
        user_type: str = "seller"
    ) -> dict:
        """Registration body as the UI sends it."""
        return {
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
            "type": user_type,
        }

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        user_type: UserType = UserType.SELLER
    ) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user({
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "first_name": "Test",
            "last_name": "User",
            "type": user_type,
        })


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def form_data(**overrides) -> dict:
        """Multipart form fields for a listing."""
        data = {
            "location": "12 Harbour Road",
            "age": "5",
            "floor_plan": "open plan",
            "bedrooms": "3",
            "additional_facilities": "pool",
            "garden": "1",
            "parking": "0",
            "proximity_facilities": "2",
            "proximity_main_roads": "1",
            "tax_records": "1200.50",
        }
        data.update(overrides)
        return {key: value for key, value in data.items() if value is not None}

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        user_id: int,
        location: str = "Test City",
        bedrooms: Optional[int] = 2,
        age: Optional[str] = "3",
        tax_records: Optional[Decimal] = Decimal("100.00"),
        photo_url: Optional[str] = None
    ) -> Property:
        """Create a test property in the database."""
        return await property_repo.create_property({
            "user_id": user_id,
            "location": location,
            "bedrooms": bedrooms,
            "age": age,
            "tax_records": tax_records,
            "photo_url": photo_url,
        })


def make_upload(
    content: bytes = b"\xff\xd8\xff\xe0fake-jpeg-bytes",
    filename: str = "house.jpg",
    content_type: str = "image/jpeg"
) -> UploadFile:
    """Build an in-memory UploadFile as the multipart parser would."""
    return UploadFile(
        file=io.BytesIO(content),
        size=len(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def photo_file(content: bytes = b"\xff\xd8\xff\xe0fake-jpeg-bytes", filename: str = "house.jpg",
               content_type: str = "image/jpeg") -> dict:
    """``files=`` argument for an httpx multipart request."""
    return {"photo": (filename, content, content_type)}


@pytest.fixture
async def test_seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="seller@example.com")


@pytest.fixture
async def registered_user(client: AsyncClient) -> dict:
    """Register a seller through the API and log in; returns the login payload."""
    payload = UserFactory.registration_payload()
    response = await client.post("/register", json=payload)
    assert response.status_code == 201

    response = await client.post(
        "/api/login",
        json={"email": payload["email"], "password": payload["password"]},
    )
    assert response.status_code == 200
    return response.json()
