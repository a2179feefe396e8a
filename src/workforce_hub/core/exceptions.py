class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(ValidationError):
    """Raised when a range overlaps an existing qualifying record."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
