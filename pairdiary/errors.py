"""Application error definitions.

Services raise these; the handlers in ``pairdiary.responses`` turn them
into the ``{"success": false, "error": ...}`` envelope with the matching
HTTP status code.
"""


class AppError(Exception):
    """Base exception for errors that are safe to show to the client.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    """Bad credentials, or a missing/invalid session."""

    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AppError):
    """Authenticated, but not allowed to touch this resource."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    """Resource or relation does not exist."""

    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Uniqueness or state-machine violation."""

    status_code = 409
    default_message = "Conflict"


class InternalError(AppError):
    """Store failure or exhausted retries."""

    status_code = 500
    default_message = "Internal server error"
