"""Auth domain dependencies.

Bearer-token verification for inbound requests, the role guard, and the
per-request AuthService factory.
"""

from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from app.auth.exceptions import (
    InsufficientRoleError,
    InvalidTokenError,
    MissingTokenClaimError,
)
from app.auth.schemas import AccessTokenClaims, RefreshTokenClaims
from app.auth.service import AuthService
from app.core.deps import SessionDep, SettingsDep
from app.core.email import ResendMailer
from app.core.security import PasswordHasher
from app.core.tokens import TokenSigner
from app.session.repository import SQLSessionRepository
from app.user.models import Role
from app.user.repository import SQLUserRepository
from app.user.service import UsersService

security = HTTPBearer(auto_error=False)

_signer = TokenSigner()

CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]


def get_users_service(session: SessionDep, settings: SettingsDep) -> UsersService:
    return UsersService(
        SQLUserRepository(session), PasswordHasher(settings.auth_bcrypt_rounds)
    )


def get_auth_service(
    session: SessionDep,
    users: Annotated[UsersService, Depends(get_users_service)],
    settings: SettingsDep,
) -> AuthService:
    """Build an AuthService bound to the request's database session."""
    return AuthService(
        users=users,
        sessions=SQLSessionRepository(session),
        signer=_signer,
        mailer=ResendMailer(settings),
        hasher=users.hasher,
        settings=settings,
    )


async def _verify_bearer(
    credentials: HTTPAuthorizationCredentials | None, secret: str
) -> dict[str, Any]:
    if credentials is None:
        raise InvalidTokenError("Not authenticated")
    return await _signer.verify(credentials.credentials, secret=secret)


async def get_access_claims(
    credentials: CredentialsDep, settings: SettingsDep
) -> AccessTokenClaims:
    """Verify the bearer access token and return its claims.

    Raises:
        InvalidTokenError: Missing, malformed, badly signed or expired token
        MissingTokenClaimError: Token verified but carries no user id
    """
    payload = await _verify_bearer(credentials, settings.auth_jwt_secret)
    if not payload.get("id"):
        raise MissingTokenClaimError()
    try:
        return AccessTokenClaims.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidTokenError() from e


async def get_refresh_claims(
    credentials: CredentialsDep, settings: SettingsDep
) -> RefreshTokenClaims:
    """Verify the bearer refresh token and return its claims."""
    payload = await _verify_bearer(credentials, settings.auth_refresh_secret)
    try:
        return RefreshTokenClaims.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidTokenError() from e


AccessClaimsDep = Annotated[AccessTokenClaims, Depends(get_access_claims)]
RefreshClaimsDep = Annotated[RefreshTokenClaims, Depends(get_refresh_claims)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UsersServiceDep = Annotated[UsersService, Depends(get_users_service)]


def require_roles(*roles: Role) -> Callable[[AccessTokenClaims], AccessTokenClaims]:
    """Build a dependency allowing only the given roles.

    Use as a router-level or endpoint-level dependency:
        router = APIRouter(dependencies=[Depends(require_roles(Role.admin))])

    An empty role list allows any authenticated caller.
    """

    def check(claims: AccessClaimsDep) -> AccessTokenClaims:
        if roles and claims.role not in roles:
            raise InsufficientRoleError()
        return claims

    return check
