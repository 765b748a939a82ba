"""Custom exception classes for API errors."""

from typing import Any

from fastapi import HTTPException, status

GENERIC_SERVER_ERROR = "Server error. Try again?"


class APIError(HTTPException):
    """Base API error with structured response."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Any = None,
    ):
        self.code = code
        self.error_message = message
        self.details = details

        super().__init__(
            status_code=status_code,
            detail={"error": message},
        )


class ValidationError(APIError):
    """Missing or malformed request input (400)."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="VALIDATION_ERROR",
            message=message,
            details=details,
        )


class UpstreamError(APIError):
    """An external collaborator failed (500).

    The client only ever sees the generic message; ``reason`` and ``source``
    are kept for logging.
    """

    code_name = "UPSTREAM_ERROR"

    def __init__(self, reason: str, source: str | None = None, details: Any = None):
        self.reason = reason
        self.source = source
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=self.code_name,
            message=GENERIC_SERVER_ERROR,
            details=details,
        )

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.reason}"
        return self.reason


class ParseError(UpstreamError):
    """Model output could not be parsed into the expected JSON shape (500)."""

    code_name = "PARSE_ERROR"
