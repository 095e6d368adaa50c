"""Tests for tokens and for turning a token into an availability requester."""

import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest
from jose import JWTError, jwt

from app.auth.dependencies import _user_id_from_token
from app.auth.jwt import ACCESS, REFRESH, create_access_token, create_refresh_token, create_token_pair, decode_token
from app.availability.service import Requester
from app.config import settings
from app.models.user import User

ACCESS_LIFETIME = timedelta(minutes=settings.jwt_access_token_expire_minutes)
REFRESH_LIFETIME = timedelta(days=settings.jwt_refresh_token_expire_days)


@pytest.mark.parametrize(
    ("create", "token_type", "lifetime"),
    [
        (create_access_token, ACCESS, ACCESS_LIFETIME),
        (create_refresh_token, REFRESH, REFRESH_LIFETIME),
    ],
)
def test_token_claims_and_default_lifetime(create, token_type, lifetime):
    payload = decode_token(create({"sub": "owner-1"}))
    assert set(payload) == {"sub", "iat", "exp", "type"}
    assert payload["sub"] == "owner-1"
    assert payload["type"] == token_type
    assert payload["exp"] - payload["iat"] == int(lifetime.total_seconds())


def test_token_pair_matches_login_response_shape():
    pair = create_token_pair("owner-1")
    assert pair["token_type"] == "bearer"
    assert decode_token(pair["access_token"])["type"] == ACCESS
    assert decode_token(pair["refresh_token"])["type"] == REFRESH


@pytest.mark.parametrize(
    "token",
    [
        create_access_token({"sub": "owner-1"}, expires_delta=timedelta(seconds=-1)),
        jwt.encode({"sub": "owner-1", "type": ACCESS}, "some-other-secret", algorithm=settings.jwt_algorithm),
        "not.a.valid.token",
        "",
    ],
    ids=["expired", "foreign-signature", "garbage", "empty"],
)
def test_unusable_tokens_raise(token):
    with pytest.raises(JWTError):
        decode_token(token)


class TestUserIdFromToken:
    """Only a valid access token with a UUID subject identifies a user."""

    def test_access_token_yields_user_id(self):
        user_id = uuid.uuid4()
        assert _user_id_from_token(create_access_token({"sub": str(user_id)})) == user_id

    def test_refresh_token_is_not_accepted(self):
        assert _user_id_from_token(create_refresh_token({"sub": str(uuid.uuid4())})) is None

    @pytest.mark.parametrize("claims", [{"sub": "not-a-uuid"}, {}])
    def test_bad_subject(self, claims):
        assert _user_id_from_token(create_access_token(claims)) is None

    def test_expired_token(self):
        token = create_access_token({"sub": str(uuid.uuid4())}, expires_delta=timedelta(seconds=-1))
        assert _user_id_from_token(token) is None


class TestRequesterFromUser:
    """The admin override on availability follows the user's role."""

    @pytest.mark.parametrize(("role", "is_admin"), [(settings.admin_role, True), ("owner", False), ("agent", False)])
    def test_role_decides_admin(self, role, is_admin):
        user = User(id=uuid.uuid4(), email="a@test.com", hashed_password="x", name="A", role=role)
        assert user.is_admin is is_admin

        requester = Requester.from_user(user)
        assert requester.user_id == user.id
        assert requester.is_admin is is_admin

    def test_requester_only_reads_id_and_admin_flag(self):
        user_id = uuid.uuid4()
        requester = Requester.from_user(SimpleNamespace(id=user_id, is_admin=1))
        assert requester == Requester(user_id=user_id, is_admin=True)
