class StorefrontError(Exception):
    """Base class for errors raised by the storefront services."""


class UnauthenticatedError(StorefrontError):
    pass


class InvalidOrderError(StorefrontError, ValueError):
    pass


class NotFoundError(StorefrontError, LookupError):
    pass


class ForbiddenError(StorefrontError, PermissionError):
    pass


class PersistenceError(StorefrontError):
    """The storage layer failed or timed out; the transaction was rolled back."""
