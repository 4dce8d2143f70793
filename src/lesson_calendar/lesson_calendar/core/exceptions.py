from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation"


class NotFoundError(DomainError):
    """Raised when a code, lesson or record does not exist."""

    code = "invalid code"


class ExpiredError(DomainError):
    """Raised when a time window has already passed."""

    code = "expired"


class DuplicateError(DomainError):
    """Raised when an idempotence key was already used."""

    code = "duplicate"


class StorageError(DomainError):
    """Raised when a read/write against the backing store fails."""

    code = "storage error"


class AuthorizationError(DomainError):
    """Raised when a member lacks permission for an action."""

    code = "forbidden"


class RejectedError(ValidationError):
    """Raised when a submission breaks a workflow rule; code names the rule."""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or code)
        self.code = code
