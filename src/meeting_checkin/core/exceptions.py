class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when there is no signed-in user or credentials are rejected."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class AlreadyCheckedInError(DomainError):
    """Raised when a shareholder already holds a ballot for the meeting."""


class IdentityProviderError(DomainError):
    """Raised when the identity provider cannot complete a request."""

    status_code = 502
