class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or the role does not match."""


class AuthorizationError(DomainError):
    """Raised when a principal lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced employee or task does not exist."""


class GatewayError(DomainError):
    """Raised when a call to the database/auth backend fails."""
