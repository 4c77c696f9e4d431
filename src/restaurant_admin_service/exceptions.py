"""Exceptions raised by the catalog, order and analytics services.

Handlers map each class to an HTTP status code and the response envelope.
"""


class AdminServiceError(Exception):
    """Base exception for admin service errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AdminServiceError):
    """Raised when input fails validation. Nothing has been written."""

    status_code = 400


class NotFoundError(AdminServiceError):
    """Raised when an id does not resolve to a stored record."""

    status_code = 404


class ConflictError(AdminServiceError):
    """Raised when a conditional write finds an existing record."""

    status_code = 409


class UnavailableError(AdminServiceError):
    """Raised when the storage layer fails or times out."""

    status_code = 500

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Storage operation '{operation}' failed")
