"""Tests for auth API endpoints: register, login, refresh, me."""

import uuid

from httpx import AsyncClient

from app.auth.jwt import create_token_pair
from app.models.user import User

# ---------------------------------------------------------------------------
# POST /api/v1/auth/register
# ---------------------------------------------------------------------------


class TestRegister:
    """Tests for email/password registration."""

    async def test_register_success(self, client: AsyncClient) -> None:
        unique = uuid.uuid4().hex[:8]
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": f"register-{unique}@test.com",
                "password": "securepass123",
                "name": "Nueva Duena",
                "phone": "+54 9 11 5555-0000",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == f"register-{unique}@test.com"
        assert data["user"]["phone"] == "+54 9 11 5555-0000"
        assert data["user"]["role"] == "owner"
        assert data["user"]["is_admin"] is False
        assert data["tokens"]["access_token"]
        assert data["tokens"]["refresh_token"]
        assert data["tokens"]["token_type"] == "bearer"

    async def test_register_cannot_request_admin_role(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": f"escalate-{uuid.uuid4().hex[:8]}@test.com",
                "password": "securepass123",
                "name": "Quiere ser admin",
                "role": "admin",
            },
        )
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "owner"
        assert response.json()["user"]["is_admin"] is False

    async def test_register_duplicate_email(self, client: AsyncClient, test_user: User) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": test_user.email, "password": "newpass123", "name": "New"},
        )
        assert response.status_code == 409
        assert "already registered" in response.json()["detail"].lower()

    async def test_register_short_password(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "short@test.com", "password": "short", "name": "Short"},
        )
        assert response.status_code == 422

    async def test_register_missing_name(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "noname@test.com", "password": "securepass123"},
        )
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# POST /api/v1/auth/login
# ---------------------------------------------------------------------------


class TestLogin:
    """Tests for email/password login."""

    async def test_login_success(self, client: AsyncClient, test_user: User) -> None:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": test_user.email, "password": "testpass123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == str(test_user.id)
        assert data["tokens"]["access_token"]

    async def test_login_wrong_password(self, client: AsyncClient, test_user: User) -> None:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": test_user.email, "password": "wrongpassword"},
        )
        assert response.status_code == 401
        assert "invalid" in response.json()["detail"].lower()

    async def test_login_nonexistent_user(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "irrelevant1"},
        )
        assert response.status_code == 401

    async def test_login_inactive_user(self, client: AsyncClient, user_factory) -> None:
        user = await user_factory(is_active=False)
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": "testpass123"},
        )
        assert response.status_code == 403


# ---------------------------------------------------------------------------
# GET /api/v1/auth/me
# ---------------------------------------------------------------------------


class TestMe:
    """Tests for the authenticated user profile endpoint."""

    async def test_me_authenticated(self, client: AsyncClient, auth_headers: dict, test_user: User) -> None:
        response = await client.get("/api/v1/auth/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == test_user.email
        assert data["name"] == test_user.name
        assert data["is_active"] is True
        assert data["is_admin"] is False

    async def test_me_reports_admin_role(self, client: AsyncClient, admin_headers: dict) -> None:
        response = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert response.json()["is_admin"] is True

    async def test_me_unauthenticated(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/auth/me")
        # HTTPBearer answers 401 or 403 depending on the FastAPI version
        assert response.status_code in (401, 403)


# ---------------------------------------------------------------------------
# POST /api/v1/auth/refresh
# ---------------------------------------------------------------------------


class TestRefresh:
    """Tests for token refresh."""

    async def test_refresh_success(self, client: AsyncClient, test_user: User) -> None:
        tokens = create_token_pair(str(test_user.id))
        response = await client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": tokens["refresh_token"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "bearer"

    async def test_refresh_invalid_token(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": "totally.invalid.token"},
        )
        assert response.status_code == 401
        assert "invalid" in response.json()["detail"].lower()

    async def test_refresh_with_access_token_fails(self, client: AsyncClient, test_user: User) -> None:
        tokens = create_token_pair(str(test_user.id))
        response = await client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": tokens["access_token"]},
        )
        assert response.status_code == 401

    async def test_refresh_for_unknown_user_fails(self, client: AsyncClient) -> None:
        tokens = create_token_pair(str(uuid.uuid4()))
        response = await client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": tokens["refresh_token"]},
        )
        assert response.status_code == 401
