"""
Tests for registration, login, lockout, token refresh and profiles.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from keyhost.config import settings
from keyhost.models.user import UserType
from keyhost.services.auth import AuthService
from keyhost.services.settings import SettingsService
from keyhost.utils.auth import create_access_token
from keyhost.utils.exceptions import (
    AccountLockedError,
    InactiveUserError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from tests.conftest import TEST_PASSWORD, UserFactory


class TestAuthService:
    """Test AuthService functionality."""

    async def test_authenticate_user_success(self, db_session, guest_user):
        user = await AuthService(db_session).authenticate_user("GUEST@example.com", TEST_PASSWORD)

        assert user.id == guest_user.id
        assert user.last_login is not None
        assert user.login_attempts == 0

    async def test_authenticate_user_invalid_credentials(self, db_session, guest_user):
        with pytest.raises(InvalidCredentialsError):
            await AuthService(db_session).authenticate_user(guest_user.email, "wrongpassword")
        assert guest_user.login_attempts == 1

    async def test_authenticate_user_not_found(self, db_session):
        with pytest.raises(InvalidCredentialsError):
            await AuthService(db_session).authenticate_user("nobody@example.com", "password")

    async def test_authenticate_user_inactive(self, db_session):
        await UserFactory.create_user(db_session, email="inactive@example.com", is_active=False)
        with pytest.raises(InactiveUserError):
            await AuthService(db_session).authenticate_user("inactive@example.com", TEST_PASSWORD)

    async def test_lockout_after_max_attempts(self, db_session, guest_user):
        service = AuthService(db_session)
        for _ in range(settings.max_login_attempts):
            with pytest.raises(InvalidCredentialsError):
                await service.authenticate_user(guest_user.email, "wrongpassword")

        assert guest_user.is_locked()
        with pytest.raises(AccountLockedError):
            await service.authenticate_user(guest_user.email, TEST_PASSWORD)

    async def test_expired_lock_allows_login(self, db_session, guest_user):
        guest_user.locked_until = datetime.now(timezone.utc) - timedelta(minutes=1)
        await db_session.commit()

        user = await AuthService(db_session).authenticate_user(guest_user.email, TEST_PASSWORD)

        assert user.locked_until is None

    async def test_token_for_unknown_user_rejected(self, db_session):
        token = create_access_token(uuid.uuid4(), "ghost@example.com", UserType.GUEST)

        with pytest.raises(InvalidTokenError):
            await AuthService(db_session).get_current_user(token)

    async def test_refresh_token_cannot_be_used_as_access_token(self, db_session, guest_user):
        service = AuthService(db_session)
        _, refresh_token = service.create_tokens(guest_user)

        with pytest.raises(InvalidTokenError):
            await service.get_current_user(refresh_token)


class TestAuthEndpoints:
    """Test the /api/auth endpoints."""

    async def test_register_property_owner(self, async_client):
        response = await async_client.post("/api/auth/register", json={
            "email": "new.owner@example.com",
            "password": "supersecret1",
            "first_name": "Nadia",
            "last_name": "Rahman",
            "user_type": "property_owner",
        })

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["email"] == "new.owner@example.com"
        assert data["user"]["user_type"] == UserType.PROPERTY_OWNER.value
        assert data["token"]
        assert data["refresh_token"]

    async def test_register_duplicate_email(self, async_client, guest_user):
        response = await async_client.post("/api/auth/register", json={
            "email": guest_user.email,
            "password": "supersecret1",
            "first_name": "Again",
            "last_name": "User",
        })
        assert response.status_code == 409

    async def test_register_admin_refused(self, async_client):
        response = await async_client.post("/api/auth/register", json={
            "email": "sneaky@example.com",
            "password": "supersecret1",
            "first_name": "Sneaky",
            "last_name": "User",
            "user_type": "admin",
        })
        assert response.status_code == 422

    async def test_register_disabled_by_setting(self, async_client, db_session):
        await SettingsService(db_session).set("registration_enabled", False, is_public=True)

        response = await async_client.post("/api/auth/register", json={
            "email": "late@example.com",
            "password": "supersecret1",
            "first_name": "Late",
            "last_name": "User",
        })
        assert response.status_code == 403

    async def test_login_returns_tokens(self, async_client, owner_user):
        response = await async_client.post(
            "/api/auth/login", json={"email": owner_user.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user"]["id"] == str(owner_user.id)
        assert body["data"]["token"]
        assert body["data"]["refresh_token"]

    async def test_login_wrong_password(self, async_client, owner_user):
        response = await async_client.post(
            "/api/auth/login", json={"email": owner_user.email, "password": "wrongpassword"}
        )
        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_login_locked_account_returns_423(self, async_client, owner_user):
        for _ in range(settings.max_login_attempts):
            await async_client.post("/api/auth/login", json={"email": owner_user.email, "password": "wrongpassword"})

        response = await async_client.post(
            "/api/auth/login", json={"email": owner_user.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 423
        assert response.json()["error"]["code"] == "ACCOUNT_LOCKED"

    async def test_refresh(self, async_client, owner_user):
        login = await async_client.post(
            "/api/auth/login", json={"email": owner_user.email, "password": TEST_PASSWORD}
        )
        refresh_token = login.json()["data"]["refresh_token"]

        response = await async_client.post("/api/auth/refresh", json={"refresh_token": refresh_token})

        assert response.status_code == 200
        assert response.json()["data"]["token"]

    async def test_me_and_profile_update(self, async_client, guest_headers):
        me = await async_client.get("/api/auth/me", headers=guest_headers)
        assert me.status_code == 200
        assert me.json()["data"]["email"] == "guest@example.com"

        response = await async_client.put(
            "/api/auth/profile",
            json={"bio": "Loves hill stations", "languages": ["English", "Bengali"]},
            headers=guest_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["bio"] == "Loves hill stations"
        assert data["languages"] == ["English", "Bengali"]

    async def test_empty_profile_update_rejected(self, async_client, guest_headers):
        response = await async_client.put("/api/auth/profile", json={}, headers=guest_headers)
        assert response.status_code == 400

    async def test_me_requires_valid_token(self, async_client):
        response = await async_client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
