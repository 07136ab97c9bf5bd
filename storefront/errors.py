"""Domain errors shared by the stores and the HTTP layer.

Every error carries the HTTP status it maps to; the API renders them all as
``{"success": false, "error": <message>}``.
"""


class StorefrontError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    status_code = 400


class AuthenticationError(StorefrontError):
    status_code = 401


class NotFoundError(StorefrontError):
    status_code = 404


class ConflictError(StorefrontError):
    """Concurrent modification or an illegal state change."""

    status_code = 409
