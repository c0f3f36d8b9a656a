"""Application errors raised by services and API dependencies.

Each error carries the HTTP status it maps to and a short ``kind`` that is
rendered into the error body as ``{"error": "<kind>: <message>"}``.
"""


class AppError(Exception):
    """Base class for errors with a defined client-facing status."""

    kind = "InternalFailure"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class NotFoundError(AppError):
    """The requested resource does not exist."""

    kind = "NotFound"
    status_code = 404


class UnauthorizedError(AppError):
    """Missing, malformed, tampered or expired token."""

    kind = "Unauthorized"
    status_code = 401


class ForbiddenError(AppError):
    """Valid token, but the caller does not own the resource."""

    kind = "Forbidden"
    status_code = 403


class InvalidCredentialsError(AppError):
    """Login with an unknown email or a wrong password."""

    kind = "InvalidCredentials"
    status_code = 401


class ConflictError(AppError):
    """A write would violate a uniqueness constraint."""

    kind = "Conflict"
    status_code = 409


class InternalFailureError(AppError):
    """The store or the hashing subsystem failed."""


class PasswordHashingError(InternalFailureError):
    """A stored password hash could not be read or computed."""
