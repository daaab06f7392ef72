"""
Error taxonomy for MockPrep.

Every error carries the HTTP status it maps to; main.py turns them into
``{"error": ..., "details": ...}`` responses.
"""

from typing import Any


class MockPrepError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(MockPrepError):
    """Required request fields are missing or malformed."""

    status_code = 400


class AuthenticationError(MockPrepError):
    status_code = 401


class AuthorizationError(MockPrepError):
    """Caller is neither the owner of the resource nor an admin."""

    status_code = 403


class NotFoundError(MockPrepError):
    status_code = 404


class ConfigurationError(MockPrepError):
    """Service is missing configuration it needs (e.g. the Gemini key)."""

    status_code = 500


class PersistenceError(MockPrepError):
    """A document store read or write failed."""

    status_code = 500


class UpstreamGenerationError(MockPrepError):
    """The generative model call failed or returned nothing usable."""

    status_code = 502
