"""Domain errors raised by services and mapped to HTTP status codes at the API boundary."""


class SweetShopError(Exception):
    """Base class for errors with a client-facing message and HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(SweetShopError):
    """Malformed or out-of-range input."""

    status_code = 400


class ConflictError(SweetShopError):
    """Username or email already taken."""

    status_code = 400


class AuthError(SweetShopError):
    """Missing, invalid or expired token, or bad login credentials."""

    status_code = 401


class ForbiddenError(SweetShopError):
    status_code = 403


class NotFoundError(SweetShopError):
    status_code = 404


class InsufficientStockError(SweetShopError):
    """Purchase quantity exceeds quantity on hand. No stock was taken."""

    status_code = 400


class InternalError(SweetShopError):
    status_code = 500
