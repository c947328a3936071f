"""
Application factory tests.
Covers settings passed to create_app, the request middleware limits,
unexpected-error handling and the startup lifespan.
"""

import asyncio
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from jose import JWTError

from estate_api.config import Settings
from estate_api.main import create_app
from estate_api.repositories.user import UserRepository
from estate_api.utils.auth import decode_access_token
from tests.conftest import ALLOWED_ORIGIN, UserFactory, TEST_PASSWORD, photo_file

OTHER_SECRET = "another-signing-secret-with-32-plus-characters"


class TestExplicitSettings:
    """Settings given to create_app drive request handling."""

    @pytest.mark.asyncio
    async def test_empty_listing_flag(self, app_client):
        async with app_client(Settings(empty_listing_not_found=False)) as (_, client):
            response = await client.get("/api/properties", params={"user_id": 999})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_token_signed_with_app_secret(self, app_client):
        settings = Settings(jwt_secret_key=OTHER_SECRET)
        payload = UserFactory.registration_payload()

        async with app_client(settings) as (_, client):
            await client.post("/register", json=payload)
            response = await client.post(
                "/api/login", json={"email": payload["email"], "password": TEST_PASSWORD}
            )

        token = response.json()["token"]
        assert decode_access_token(token, settings).email == payload["email"].lower()
        with pytest.raises(JWTError):
            decode_access_token(token)

    @pytest.mark.asyncio
    async def test_app_owns_engine(self):
        settings = Settings(request_timeout_seconds=5)
        custom_app = create_app(settings)

        assert custom_app.state.settings is settings
        assert str(custom_app.state.engine.url) == settings.database_url
        await custom_app.state.engine.dispose()


class TestRequestLimits:
    """Request timeout and body size ceiling."""

    @pytest.mark.asyncio
    async def test_slow_request_times_out(self, app_client):
        def add_slow_route(custom_app):
            @custom_app.get("/slow")
            async def slow():
                await asyncio.sleep(0.5)
                return {"status": "done"}

        async with app_client(Settings(request_timeout_seconds=0.05), add_slow_route) as (_, client):
            response = await client.get("/slow")

        assert response.status_code == 504
        body = response.json()
        assert body["error"]["code"] == "REQUEST_TIMEOUT"
        assert body["message"] == "Request timed out after 0.05 seconds"

    @pytest.mark.asyncio
    async def test_oversized_body_rejected(self, app_client):
        async with app_client(Settings(max_request_size=64)) as (_, client):
            response = await client.post("/register", json=UserFactory.registration_payload())

        assert response.status_code == 400
        assert "exceeds maximum allowed size 64 bytes" in response.json()["message"]


class TestUnexpectedErrors:
    """Unhandled exceptions become the generic 500."""

    @pytest.mark.asyncio
    async def test_generic_message_with_cors_headers(self, app_client):
        def add_failing_route(custom_app):
            @custom_app.get("/explode")
            async def explode():
                raise RuntimeError("secret internals")

        async with app_client(Settings(), add_failing_route) as (_, client):
            response = await client.get("/explode", headers={"Origin": ALLOWED_ORIGIN})

        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error."
        assert "secret internals" not in response.text
        assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN

    @pytest.mark.asyncio
    async def test_disk_failure_on_photo_save(self, client, registered_user: dict, settings):
        user_id = registered_user["userData"]["id"]
        before = sorted(Path(settings.upload_dir).iterdir())

        with patch(
            "estate_api.utils.file_utils.aiofiles.open",
            side_effect=OSError(28, "No space left on device"),
        ):
            response = await client.post(
                "/api/properties", data={"user_id": str(user_id)}, files=photo_file()
            )

        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error."
        assert "No space" not in response.text
        assert sorted(Path(settings.upload_dir).iterdir()) == before


class TestLifespan:
    """Startup creates tables and seeds the admin account."""

    @pytest.mark.asyncio
    async def test_startup_seeds_admin(self, caplog):
        caplog.set_level(logging.INFO)
        settings = Settings(admin_email="Owner@Example.com", admin_password="admin-secret-pw")
        custom_app = create_app(settings)

        async with custom_app.router.lifespan_context(custom_app):
            async with custom_app.state.session_factory() as session:
                admin = await UserRepository(session).get_by_email("owner@example.com")

        assert admin is not None
        assert admin.is_admin
        assert admin.verify_password("admin-secret-pw")
        assert "Serving uploads from" in caplog.text
        assert "Tables initialized." in caplog.text

    @pytest.mark.asyncio
    async def test_startup_without_admin(self):
        custom_app = create_app(Settings())

        async with custom_app.router.lifespan_context(custom_app):
            async with custom_app.state.session_factory() as session:
                assert await UserRepository(session).email_exists("admin@example.com") is False
