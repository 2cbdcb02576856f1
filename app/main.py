import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqladmin import Admin

from app.admin.auth import AdminAuth
from app.admin.views import SessionAdmin, UserAdmin
from app.core.cors import add_cors_middleware
from app.core.email import init_resend
from app.core.exception_handlers import register_exception_handlers
from app.core.logging import configure_logging
from app.core.request_logging import add_request_logging_middleware
from app.core.settings import get_settings
from app.db.engine import create_db_and_tables, engine
from app.router import api_router

configure_logging()

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_resend()
    if settings.database_synchronize:
        await create_db_and_tables()
        logger.info("Database tables synchronized")
    yield
    await engine.dispose()


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.include_router(api_router, prefix=settings.api_prefix)

add_request_logging_middleware(app)
add_cors_middleware(app)
register_exception_handlers(app)

# Mount SQLAdmin UI at /admin (SQLAdmin enables sessions via auth backend secret)
admin = Admin(
    app=app,
    engine=engine,
    authentication_backend=AdminAuth(),
)
admin.add_view(UserAdmin)
admin.add_view(SessionAdmin)
