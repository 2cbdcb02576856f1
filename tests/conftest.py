import inspect
import os
from contextlib import asynccontextmanager

# Settings are read when app.db.engine is imported; provide test values first.
_TEST_ENV = {
    "DATABASE_URL": "sqlite+aiosqlite://",
    "SESSION_SECRET_KEY": "test-session-secret-key-0123456789",
    "ADMIN_USERNAME": "admin",
    "ADMIN_PASSWORD": "admin-password",
    "AUTH_JWT_SECRET": "test-jwt-secret-0123456789abcdef0123",
    "AUTH_REFRESH_SECRET": "test-refresh-secret-0123456789abcdef",
    "AUTH_FORGOT_SECRET": "test-forgot-secret-0123456789abcdef0",
    "AUTH_CONFIRM_EMAIL_SECRET": "test-confirm-secret-0123456789abcdef",
    "LOG_REQUESTS": "false",
}
for _key, _value in _TEST_ENV.items():
    os.environ.setdefault(_key, _value)
os.environ.pop("RESEND_API_KEY", None)

import anyio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

import app.models  # noqa: E402, F401
from app.auth.dependencies import get_auth_service, get_users_service  # noqa: E402
from app.auth.service import AuthService  # noqa: E402
from app.core.security import PasswordHasher  # noqa: E402
from app.core.settings import Settings, get_settings  # noqa: E402
from app.core.tokens import TokenSigner  # noqa: E402
from app.db.engine import enable_sqlite_foreign_keys  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.user.service import UsersService  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemorySessionRepository,
    InMemoryUserRepository,
    RecordingMailer,
)


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


# --- Fixtures ---


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    return Settings(
        env_name="test",
        database_url="sqlite+aiosqlite://",
        session_secret_key=_TEST_ENV["SESSION_SECRET_KEY"],
        admin_username="admin",
        admin_password="admin-password",
        resend_api_key=None,
        auth_jwt_secret=_TEST_ENV["AUTH_JWT_SECRET"],
        auth_refresh_secret=_TEST_ENV["AUTH_REFRESH_SECRET"],
        auth_forgot_secret=_TEST_ENV["AUTH_FORGOT_SECRET"],
        auth_confirm_email_secret=_TEST_ENV["AUTH_CONFIRM_EMAIL_SECRET"],
        auth_bcrypt_rounds=4,
    )


@pytest.fixture(name="hasher")
def hasher_fixture() -> PasswordHasher:
    # Minimum cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture(name="signer")
def signer_fixture() -> TokenSigner:
    return TokenSigner()


@pytest.fixture(name="session_repo")
def session_repo_fixture() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture(name="user_repo")
def user_repo_fixture(
    session_repo: InMemorySessionRepository,
) -> InMemoryUserRepository:
    return InMemoryUserRepository(session_repo)


@pytest.fixture(name="users_service")
def users_service_fixture(
    user_repo: InMemoryUserRepository, hasher: PasswordHasher
) -> UsersService:
    return UsersService(user_repo, hasher)


@pytest.fixture(name="mailer")
def mailer_fixture() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture(name="auth_service")
def auth_service_fixture(
    users_service: UsersService,
    session_repo: InMemorySessionRepository,
    signer: TokenSigner,
    mailer: RecordingMailer,
    hasher: PasswordHasher,
    settings: Settings,
) -> AuthService:
    return AuthService(
        users=users_service,
        sessions=session_repo,
        signer=signer,
        mailer=mailer,
        hasher=hasher,
        settings=settings,
    )


@pytest.fixture(name="sqlite_engine")
def sqlite_engine_fixture():
    """Factory for a fresh in-memory SQLite engine with all tables created.

    The engine is bound to the event loop it is used in, so it is built
    inside the async test:

        async with sqlite_engine() as engine:
            ...
    """

    @asynccontextmanager
    async def _factory():
        engine = create_async_engine(
            "sqlite+aiosqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        enable_sqlite_foreign_keys(engine)
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        try:
            yield engine
        finally:
            await engine.dispose()

    return _factory


@pytest.fixture(name="client")
def client_fixture(
    auth_service: AuthService, users_service: UsersService, settings: Settings
):
    """Test client whose services run over the in-memory stores."""
    fastapi_app.dependency_overrides[get_auth_service] = lambda: auth_service
    fastapi_app.dependency_overrides[get_users_service] = lambda: users_service
    fastapi_app.dependency_overrides[get_settings] = lambda: settings

    client = TestClient(fastapi_app)
    yield client

    fastapi_app.dependency_overrides.clear()
