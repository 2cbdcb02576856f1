"""Error response schemas for consistent API error formatting."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema.

    All API errors return this format for consistency. ``errors`` maps field
    names to machine-readable codes, e.g. ``{"email": "notFound"}``.
    """

    type: str
    message: str
    errors: dict[str, str] | None = None
