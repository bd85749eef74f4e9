"""Domain errors raised by the auth, user and message layers.

These carry no transport details. The API layer (messagely.api.errors)
decides which HTTP status each one becomes, so services stay usable
outside FastAPI (CLI scripts, tests, background jobs).
"""


class MessagelyError(Exception):
    """Base class for every error the core raises on purpose."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MessagelyError):
    """A required field is missing or empty."""


class ConflictError(MessagelyError):
    """The record would violate a uniqueness rule (e.g. username taken)."""


class NotFoundError(MessagelyError):
    """A referenced username or message id does not exist."""


class ForbiddenError(MessagelyError):
    """The authenticated identity has no rights over the target resource."""


class InvalidTokenError(MessagelyError):
    """Bearer token is malformed, tampered with, or expired."""


class AuthenticationError(MessagelyError):
    """Login failed: wrong password or unknown username."""
