"""Authentication service.

Coordinates the credential store, the session store, the token signer and the
mailer to implement login, registration, email confirmation, profile update,
token refresh and logout. It owns no persistent state: users and sessions are
borrowed from their stores per call.
"""

import asyncio
import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from app.auth.exceptions import InvalidTokenError, SessionInvalidError
from app.auth.schemas import (
    AccessTokenClaims,
    AuthRegister,
    AuthUpdate,
    ConfirmEmailClaims,
    RefreshTokenClaims,
)
from app.core.email import ConfirmationMailer
from app.core.exceptions import NotFoundError, ValidationError
from app.core.security import PasswordHasher, generate_session_hash
from app.core.settings import Settings
from app.core.tokens import TokenSigner
from app.session.models import UserSession
from app.session.repository import SessionStore
from app.user.models import AuthProvider, Role, User, UserStatus
from app.user.schemas import UserCreate, UserUpdate
from app.user.service import UserStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    """Access + refresh tokens bound to one session."""

    token: str
    refresh_token: str
    token_expires: int  # epoch milliseconds


@dataclass(frozen=True)
class LoginResult(TokenPair):
    user: User


class AuthService:
    def __init__(
        self,
        *,
        users: UserStore,
        sessions: SessionStore,
        signer: TokenSigner,
        mailer: ConfirmationMailer,
        hasher: PasswordHasher,
        settings: Settings,
    ) -> None:
        self.users = users
        self.sessions = sessions
        self.signer = signer
        self.mailer = mailer
        self.hasher = hasher
        self.settings = settings

    async def validate_login(self, email: str, password: str) -> LoginResult:
        """Check email/password credentials and open a new session.

        Raises:
            ValidationError: Unknown email, non-email provider, missing or
                incorrect password (field-keyed)
        """
        user = await self.users.find_by_email(email)
        if user is None:
            raise ValidationError("User not found", {"email": "notFound"})

        if user.provider != AuthProvider.email:
            raise ValidationError(
                "Account must log in through its identity provider",
                {"email": f"needLoginViaProvider:{user.provider.value}"},
            )

        await self._validate_password(user.password, password)

        session = await self._create_session(user)
        tokens = await self._issue_tokens(user, session)
        logger.info(
            "User logged in",
            extra={"user_id": user.id, "session_id": session.id},
        )
        return LoginResult(
            token=tokens.token,
            refresh_token=tokens.refresh_token,
            token_expires=tokens.token_expires,
            user=user,
        )

    async def register(self, data: AuthRegister) -> None:
        """Create an inactive email account and mail its confirmation token.

        Mailer failures propagate to the caller.
        """
        user = await self.users.create(
            UserCreate(
                email=data.email,
                password=data.password,
                first_name=data.first_name,
                last_name=data.last_name,
                provider=AuthProvider.email,
                role=Role.user,
                status=UserStatus.inactive,
            )
        )

        token = await self.signer.sign(
            ConfirmEmailClaims(confirm_email_user_id=user.id).to_claims(),
            secret=self.settings.auth_confirm_email_secret,
            expires_in=self.settings.auth_confirm_email_token_expires_in,
        )
        await self.mailer.send_confirmation(to=data.email, token=token)
        logger.info("Confirmation email dispatched", extra={"user_id": user.id})

    async def confirm_email(self, hash: str) -> None:
        """Activate the user named by a confirmation token.

        Raises:
            ValidationError: Token invalid for any reason (``hash: invalidHash``)
            NotFoundError: User missing or not inactive
        """
        try:
            claims = ConfirmEmailClaims.model_validate(
                await self.signer.verify(
                    hash, secret=self.settings.auth_confirm_email_secret
                )
            )
        except (InvalidTokenError, ValueError) as e:
            raise ValidationError(
                "Invalid confirmation hash", {"hash": "invalidHash"}
            ) from e

        user = await self.users.find_by_id(claims.confirm_email_user_id)
        if user is None or user.status != UserStatus.inactive:
            raise NotFoundError("User not found", {"user": "notFound"})

        await self.users.update(user.id, UserUpdate(status=UserStatus.active))
        logger.info("Email confirmed", extra={"user_id": user.id})

    async def me(self, claims: AccessTokenClaims) -> User | None:
        return await self.users.find_by_id(claims.id)

    async def update(self, claims: AccessTokenClaims, data: AuthUpdate) -> User | None:
        """Apply a self-service update.

        A password change requires the old password and revokes every other
        session of the user; the session performing the update survives.
        """
        current_user = await self.users.find_by_id(claims.id)
        if current_user is None:
            raise ValidationError("User not found", {"user": "userNotFound"})

        payload = data.model_dump(exclude_unset=True)
        old_password = payload.pop("old_password", None)

        password_changed = bool(payload.get("password"))
        if password_changed:
            if not old_password:
                raise ValidationError(
                    "Old password is required", {"oldPassword": "missingOldPassword"}
                )
            await self._validate_password(current_user.password, old_password)

        # Sessions are revoked only once the update is stored.
        await self.users.update(claims.id, UserUpdate(**payload))

        if password_changed:
            await self.sessions.delete_by_user_id_except(
                user_id=current_user.id, exclude_session_id=claims.session_id
            )
            logger.info(
                "Password changed, other sessions revoked",
                extra={"user_id": current_user.id, "session_id": claims.session_id},
            )

        return await self.users.find_by_id(claims.id)

    async def refresh_token(self, session_id: uuid.UUID, hash: str) -> TokenPair:
        """Reissue tokens for an existing session (no rotation).

        Raises:
            SessionInvalidError: Session missing or hash mismatch
        """
        session = await self.sessions.find_by_id(session_id)
        if session is None or not secrets.compare_digest(
            session.hash.encode(), hash.encode()
        ):
            raise SessionInvalidError()

        user = await self.users.find_by_id(session.user_id)
        if user is None:
            raise SessionInvalidError()

        logger.info(
            "Tokens refreshed", extra={"user_id": user.id, "session_id": session.id}
        )
        return await self._issue_tokens(user, session)

    async def delete(self, claims: AccessTokenClaims) -> None:
        await self.users.remove(claims.id)

    async def logout(self, session_id: uuid.UUID) -> None:
        await self.sessions.delete_by_id(session_id)
        logger.info("Session closed", extra={"session_id": session_id})

    async def _validate_password(
        self, password_hash: str | None, password: str | None
    ) -> None:
        if not password or not password_hash:
            raise ValidationError(
                "Password is required", {"password": "missingPassword"}
            )

        if not await self.hasher.verify(password, password_hash):
            raise ValidationError(
                "Incorrect password", {"password": "incorrectPassword"}
            )

    async def _create_session(self, user: User) -> UserSession:
        return await self.sessions.create(user_id=user.id, hash=generate_session_hash())

    async def _issue_tokens(self, user: User, session: UserSession) -> TokenPair:
        """Sign access and refresh tokens concurrently; either failing fails both."""
        expires_in = self.settings.auth_jwt_token_expires_in
        token_expires = int((datetime.now(UTC) + expires_in).timestamp() * 1000)

        access_claims = AccessTokenClaims(
            id=user.id, role=user.role, session_id=session.id
        )
        refresh_claims = RefreshTokenClaims(session_id=session.id, hash=session.hash)

        token, refresh_token = await asyncio.gather(
            self.signer.sign(
                access_claims.to_claims(),
                secret=self.settings.auth_jwt_secret,
                expires_in=expires_in,
            ),
            self.signer.sign(
                refresh_claims.to_claims(),
                secret=self.settings.auth_refresh_secret,
                expires_in=self.settings.auth_refresh_token_expires_in,
            ),
        )

        return TokenPair(
            token=token, refresh_token=refresh_token, token_expires=token_expires
        )
