"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
common response definitions and email templates.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.models.error import ErrorResponse


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    AUTH = RouteConfig(prefix="/auth", tag="auth")
    USER = RouteConfig(prefix="/users", tag="users")
    HEALTH = RouteConfig(prefix="/health", tag="health")


class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    UNAUTHORIZED: dict[int | str, dict[str, Any]] = {
        401: {
            "model": ErrorResponse,
            "description": "Missing, invalid or expired token",
        }
    }
    FORBIDDEN: dict[int | str, dict[str, Any]] = {
        403: {"model": ErrorResponse, "description": "Role not allowed"}
    }
    NOT_FOUND: dict[int | str, dict[str, Any]] = {
        404: {"model": ErrorResponse, "description": "Resource not found"}
    }
    UNPROCESSABLE: dict[int | str, dict[str, Any]] = {
        422: {
            "model": ErrorResponse,
            "description": "Invalid input, see the field-keyed errors map",
        }
    }


@dataclass(frozen=True)
class EmailTemplate:
    """A source template and the variables it renders."""

    source: str
    variables: tuple[str, ...]

    @property
    def compiled(self) -> str:
        return Path(self.source).stem + ".html"


class EmailTemplates:
    CONFIRM_EMAIL = EmailTemplate("confirm-email.j2", ("app_name", "confirm_url"))

    ALL = (CONFIRM_EMAIL,)


# HTML Templates Directory
EmailTemplatesDir = Path(__file__).parent.parent / "templates" / "emails"
CompiledEmailTemplatesDir = EmailTemplatesDir / "compiled"

# Jinja2 environment for source templates (used by compile script)
JinjaEmailTemplatesEnv = Environment(
    loader=FileSystemLoader(str(EmailTemplatesDir)),
    autoescape=select_autoescape(["html", "xml", "j2"]),
)

# Jinja2 environment for compiled templates (used at runtime)
JinjaCompiledEmailTemplatesEnv = Environment(
    loader=FileSystemLoader(str(CompiledEmailTemplatesDir)),
    autoescape=select_autoescape(["html", "xml"]),
)
