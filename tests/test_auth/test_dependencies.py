"""Tests for auth dependencies: get_current_user edge cases and get_requester."""

import uuid
from datetime import timedelta

from httpx import AsyncClient

from app.auth.jwt import create_access_token, create_token_pair
from app.availability.service import Requester
from app.models.user import User


class TestGetCurrentUser:
    """Test get_current_user dependency via the /me endpoint."""

    async def test_expired_token_rejected(self, client: AsyncClient, test_user: User):
        token = create_access_token({"sub": str(test_user.id)}, expires_delta=timedelta(seconds=-1))
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_invalid_token_format(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.valid.jwt"})
        assert response.status_code == 401

    async def test_refresh_token_type_rejected(self, client: AsyncClient, test_user: User):
        tokens = create_token_pair(str(test_user.id))
        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
        )
        assert response.status_code == 401

    async def test_non_uuid_subject_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": "not-a-uuid"})
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_nonexistent_user_id_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": str(uuid.uuid4())})
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_inactive_user_rejected(self, client: AsyncClient, user_factory):
        user = await user_factory(is_active=False)
        token = create_access_token({"sub": str(user.id)})
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestRequester:
    async def test_owner_is_not_admin(self, test_user: User):
        requester = Requester.from_user(test_user)
        assert requester.user_id == test_user.id
        assert requester.is_admin is False

    async def test_admin_role(self, admin_user: User):
        assert Requester.from_user(admin_user).is_admin is True
