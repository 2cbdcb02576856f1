"""Auth domain router.

Thin HTTP handlers for login, registration, email confirmation, profile
management, token refresh and logout. Business rules live in AuthService.
"""

from fastapi import APIRouter, status

from app.auth.dependencies import AccessClaimsDep, AuthServiceDep, RefreshClaimsDep
from app.auth.schemas import (
    AuthConfirmEmail,
    AuthEmailLogin,
    AuthRegister,
    AuthUpdate,
    LoginResponse,
    TokenResponse,
)
from app.core.constants import CommonResponses, Routes
from app.user.schemas import UserRead

router = APIRouter(
    prefix=Routes.AUTH.prefix,
    tags=[Routes.AUTH.tag],
    responses={**CommonResponses.UNPROCESSABLE},
)


@router.post("/email/login", response_model=LoginResponse)
async def login(payload: AuthEmailLogin, auth: AuthServiceDep):
    """Log in with email and password, opening a new session."""
    result = await auth.validate_login(payload.email, payload.password)
    return LoginResponse(
        token=result.token,
        refresh_token=result.refresh_token,
        token_expires=result.token_expires,
        user=UserRead.model_validate(result.user),
    )


@router.post("/email/register", status_code=status.HTTP_204_NO_CONTENT)
async def register(payload: AuthRegister, auth: AuthServiceDep) -> None:
    """Register an inactive account and email its confirmation link."""
    await auth.register(payload)


@router.post(
    "/email/confirm",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**CommonResponses.NOT_FOUND},
)
async def confirm_email(payload: AuthConfirmEmail, auth: AuthServiceDep) -> None:
    """Activate an account using the hash from the confirmation email."""
    await auth.confirm_email(payload.hash)


@router.get(
    "/me",
    response_model=UserRead | None,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def me(claims: AccessClaimsDep, auth: AuthServiceDep):
    """Return the authenticated user."""
    return await auth.me(claims)


@router.patch(
    "/me",
    response_model=UserRead | None,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def update_me(payload: AuthUpdate, claims: AccessClaimsDep, auth: AuthServiceDep):
    """Update the authenticated user's profile.

    Changing the password requires ``old_password`` and signs out every
    other session.
    """
    return await auth.update(claims, payload)


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def delete_me(claims: AccessClaimsDep, auth: AuthServiceDep) -> None:
    """Delete the authenticated user."""
    await auth.delete(claims)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def refresh(claims: RefreshClaimsDep, auth: AuthServiceDep):
    """Exchange a refresh token (as bearer) for a new token pair."""
    tokens = await auth.refresh_token(claims.session_id, claims.hash)
    return TokenResponse(
        token=tokens.token,
        refresh_token=tokens.refresh_token,
        token_expires=tokens.token_expires,
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def logout(claims: AccessClaimsDep, auth: AuthServiceDep) -> None:
    """Close the session the access token belongs to."""
    await auth.logout(claims.session_id)
