class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidFormat(ValidationError):
    """Raised when a time or time-range text is malformed."""


class ConflictError(DomainError):
    """Raised when a slot overlaps an existing entry or request.

    ``subject`` and ``time`` identify the colliding item when known.
    """

    def __init__(self, message: str, *, subject: str | None = None, time: str | None = None):
        super().__init__(message)
        self.subject = subject
        self.time = time


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class IdentityError(DomainError):
    """Raised by the identity provider for account-level failures."""

    message = "Registration failed. Please try again."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class EmailAlreadyInUse(IdentityError):
    message = "An account with this email already exists."


class InvalidEmail(IdentityError):
    message = "Please enter a valid email address."


class WeakPassword(IdentityError):
    message = "Password should be at least 6 characters long."


class RemoteFailure(DomainError):
    """Raised when the document store or identity provider call fails."""
