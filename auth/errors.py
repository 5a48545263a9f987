"""
Error taxonomy for the registration and sign-in flows.

Each error carries the HTTP status and the public message that the
outcome boundary sends to the client.  Nothing else about the failure
crosses that boundary.
"""

from __future__ import annotations


class AuthServiceError(Exception):
    """Base class for every failure the auth handlers can report."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.public_message
        super().__init__(self.message)


class ValidationError(AuthServiceError):
    """Malformed or missing input, correctable by the client."""

    status_code = 400
    public_message = "Invalid request"


class ConflictError(AuthServiceError):
    """Email or wallet address already belongs to an account.

    Kept at 400 rather than 409 to match what existing clients expect.
    """

    status_code = 400
    public_message = "User with this email or wallet address already exists"


class AuthError(AuthServiceError):
    """Unknown email or wrong password; the two are indistinguishable."""

    status_code = 401
    public_message = "Invalid credentials"


class ServiceUnavailable(AuthServiceError):
    """The credential store did not answer within the configured bound."""

    status_code = 503
    public_message = "Service temporarily unavailable"


class ServerError(AuthServiceError):
    """Unexpected fault.  Details are logged, never returned."""

    status_code = 500
