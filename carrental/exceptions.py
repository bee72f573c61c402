"""
Custom exception classes for the car rental API.

Every error a handler can produce is an AppError. The application factory
registers a handler that turns it into a JSON body with a human-readable
`message` and the matching HTTP status code.
"""


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Error: internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    """Raised when a request field is missing or malformed."""

    status_code = 400
    default_message = "Error: invalid request"

    def __init__(self, message: str | None = None, errors: list | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class UnauthenticatedError(AppError):
    """Raised when credentials or the bearer token are missing or wrong."""

    status_code = 401
    default_message = "Error: unauthorized access"


class InvalidTokenError(UnauthenticatedError):
    """Raised when a token is expired, malformed or has a bad signature."""

    default_message = "Error: invalid or expired token"


class ForbiddenError(AppError):
    """Raised when an authenticated caller lacks the required role."""

    status_code = 403
    default_message = "Error: insufficient permission"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Error: resource not found"


class UserNotFoundError(NotFoundError):
    default_message = "Error: user not found"


class CarNotFoundError(NotFoundError):
    default_message = "Error: car not found"


class RentalNotFoundError(NotFoundError):
    default_message = "Error: rental not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Error: conflict with existing data"


class EmailAlreadyRegisteredError(ConflictError):
    default_message = "Error: there is already a user with this email"


class BookingConflictError(ConflictError):
    """Raised when a car is already booked for part of the requested dates."""

    default_message = "Error: car is already booked for these dates"


class InvalidStatusTransitionError(ConflictError):
    """Raised when a rental in a terminal state is moved to another state."""

    default_message = "Error: rental status cannot be changed"


class UpstreamError(AppError):
    status_code = 502
    default_message = "Error: upstream service unavailable"


class ImageUploadError(UpstreamError):
    default_message = "Error: image upload failed"


class DatabaseUnavailableError(UpstreamError):
    default_message = "Error: database unavailable"
