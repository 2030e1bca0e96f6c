"""Error types raised by services and mapped to HTTP responses by the API layer."""


class BidManagementError(Exception):
    """Base class for errors with a well-defined HTTP status."""

    status_code = 500

    def __init__(self, message: str, details=None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidRequestError(BidManagementError):
    """Missing or invalid input (400)."""

    status_code = 400


class AuthenticationError(BidManagementError):
    """Bad credentials, missing token or expired session (401)."""

    status_code = 401


class PermissionDeniedError(BidManagementError):
    """Authenticated user lacks the role for an action (403)."""

    status_code = 403


class NotFoundError(BidManagementError):
    """Requested record does not exist (404)."""

    status_code = 404


class AIServiceError(BidManagementError):
    """Upstream completion service failed or is not configured."""

    status_code = 500
