"""
domain.exceptions - Custom exception hierarchy for the meal-ordering backend.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed. The REST adapter maps the four
client-facing families (BadRequestError, AuthenticationError,
ForbiddenError, NotFoundError) to HTTP status codes in one place.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


# ---------------------------------------------------------------------------
# 400 family
# ---------------------------------------------------------------------------

class BadRequestError(DomainError):
    """Raised when the caller supplied unusable input."""


class ValidationError(BadRequestError):
    """Raised when one or more fields fail shape or range checks."""

    def __init__(self, errors: list[str], message: str = "Validation error"):
        super().__init__(message)
        self.errors = list(errors)


class InvalidRatingError(ValidationError):
    """Raised when a review rating is not an integer between 1 and 5."""

    def __init__(self, message: str = "Rating must be an integer between 1 and 5"):
        super().__init__([message], message)


class DuplicateEmailError(BadRequestError):
    """Raised when attempting to register with an email that already exists."""


class DuplicateProfileError(BadRequestError):
    """Raised when an account already has a profile of the requested kind."""


class MealUnavailableError(BadRequestError):
    """Raised when an order references a meal that is not available."""


class InvalidTransitionError(BadRequestError):
    """Raised when an order status change is not allowed by the lifecycle."""


# ---------------------------------------------------------------------------
# 401 family
# ---------------------------------------------------------------------------

class AuthenticationError(DomainError):
    """Raised when a request carries no usable credentials."""


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token is malformed, forged or expired."""


class InvalidCredentialsError(AuthenticationError):
    """Raised when email, password or role do not match an account."""


# ---------------------------------------------------------------------------
# 403 / 404 / 500
# ---------------------------------------------------------------------------

class ForbiddenError(DomainError):
    """Raised when the caller's role or ownership does not permit the action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class MealNotFoundError(NotFoundError):
    """Raised when an order references a meal id that does not exist."""
