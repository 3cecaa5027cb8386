from typing import Optional


class ClientError(Exception):
    """Base class for storefront client failures. `kind` names the failure for the UI."""

    kind = "error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UnauthenticatedError(ClientError):
    kind = "unauthenticated"


class InvalidInputError(ClientError):
    kind = "invalid-input"


class NotFoundError(ClientError):
    kind = "not-found"


class ForbiddenError(ClientError):
    kind = "forbidden"


class ServerError(ClientError):
    kind = "server-error"


class SubmissionInProgressError(ClientError):
    kind = "in-progress"
