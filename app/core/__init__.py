"""Core utilities package."""

from app.core.exceptions import (
    GENERIC_SERVER_ERROR,
    APIError,
    ParseError,
    UpstreamError,
    ValidationError,
)

__all__ = [
    "GENERIC_SERVER_ERROR",
    "APIError",
    "ValidationError",
    "UpstreamError",
    "ParseError",
]
