"""
Task Manager API - Service Errors

Domain exceptions raised by the service layer. Each one carries the HTTP
status it is rendered with; the mapping happens in one exception handler
registered on the application.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 400
    default_detail: str = "Bad request"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(ServiceError):
    """Malformed or disallowed input."""

    status_code = 400
    default_detail = "Invalid input"


class AuthError(ServiceError):
    """Missing, invalid, expired or revoked credential."""

    status_code = 401
    default_detail = "Please authenticate."


class LoginError(AuthError):
    """Bad email/password pair. Never says which half was wrong."""

    status_code = 400
    default_detail = "Unable to login"


class NotFoundError(ServiceError):
    """Missing resource, or one owned by somebody else."""

    status_code = 404
    default_detail = "Not found"


class ConflictError(ServiceError):
    """Duplicate value for a unique field."""

    status_code = 400
    default_detail = "Already exists"
