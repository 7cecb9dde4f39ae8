class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced participant or activity does not exist."""


class ConflictError(DomainError):
    """Raised by a repository when a conditional write loses to an existing row."""
