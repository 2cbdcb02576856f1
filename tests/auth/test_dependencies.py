"""Tests for app/auth/dependencies.py - bearer verification and role guard."""

import uuid
from datetime import timedelta

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from app.auth.dependencies import (
    get_access_claims,
    get_refresh_claims,
    require_roles,
)
from app.auth.exceptions import (
    InsufficientRoleError,
    InvalidTokenError,
    MissingTokenClaimError,
)
from app.auth.schemas import AccessTokenClaims
from app.user.models import Role


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.mark.asyncio
async def test_access_claims_valid(signer, settings):
    user_id, session_id = uuid.uuid4(), uuid.uuid4()
    token = await signer.sign(
        {"id": str(user_id), "role": "doctor", "sessionId": str(session_id)},
        secret=settings.auth_jwt_secret,
        expires_in=timedelta(minutes=5),
    )

    claims = await get_access_claims(_credentials(token), settings)

    assert claims.id == user_id
    assert claims.role == Role.doctor
    assert claims.session_id == session_id


@pytest.mark.asyncio
async def test_access_claims_missing_credentials(settings):
    with pytest.raises(InvalidTokenError):
        await get_access_claims(None, settings)


@pytest.mark.asyncio
async def test_access_claims_expired(signer, settings):
    token = await signer.sign(
        {"id": str(uuid.uuid4()), "role": "user", "sessionId": str(uuid.uuid4())},
        secret=settings.auth_jwt_secret,
        expires_in=timedelta(seconds=-1),
    )

    with pytest.raises(InvalidTokenError):
        await get_access_claims(_credentials(token), settings)


@pytest.mark.asyncio
async def test_access_claims_without_id(signer, settings):
    """A verified token lacking the id claim is a distinct failure."""
    token = await signer.sign(
        {"role": "user", "sessionId": str(uuid.uuid4())},
        secret=settings.auth_jwt_secret,
        expires_in=timedelta(minutes=5),
    )

    with pytest.raises(MissingTokenClaimError):
        await get_access_claims(_credentials(token), settings)


@pytest.mark.asyncio
async def test_access_claims_without_session(signer, settings):
    token = await signer.sign(
        {"id": str(uuid.uuid4()), "role": "user"},
        secret=settings.auth_jwt_secret,
        expires_in=timedelta(minutes=5),
    )

    with pytest.raises(InvalidTokenError):
        await get_access_claims(_credentials(token), settings)


@pytest.mark.asyncio
async def test_refresh_claims_valid(signer, settings):
    session_id = uuid.uuid4()
    token = await signer.sign(
        {"sessionId": str(session_id), "hash": "ab" * 32},
        secret=settings.auth_refresh_secret,
        expires_in=timedelta(minutes=5),
    )

    claims = await get_refresh_claims(_credentials(token), settings)

    assert claims.session_id == session_id
    assert claims.hash == "ab" * 32


@pytest.mark.asyncio
async def test_refresh_claims_reject_access_secret(signer, settings):
    token = await signer.sign(
        {"sessionId": str(uuid.uuid4()), "hash": "ab" * 32},
        secret=settings.auth_jwt_secret,
        expires_in=timedelta(minutes=5),
    )

    with pytest.raises(InvalidTokenError):
        await get_refresh_claims(_credentials(token), settings)


class TestRequireRoles:
    def _claims(self, role: Role | None) -> AccessTokenClaims:
        return AccessTokenClaims(id=uuid.uuid4(), role=role, session_id=uuid.uuid4())

    def test_allows_listed_role(self):
        check = require_roles(Role.admin, Role.doctor)
        claims = self._claims(Role.doctor)

        assert check(claims) is claims

    def test_rejects_other_role(self):
        check = require_roles(Role.admin)

        with pytest.raises(InsufficientRoleError):
            check(self._claims(Role.patient))

    def test_rejects_missing_role(self):
        check = require_roles(Role.admin)

        with pytest.raises(InsufficientRoleError):
            check(self._claims(None))

    def test_no_roles_allows_any_caller(self):
        check = require_roles()
        claims = self._claims(Role.user)

        assert check(claims) is claims
