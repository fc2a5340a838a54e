class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class InvalidTransition(DomainError):
    """Raised by the clock state machine when an action does not apply to the current state.

    The attendance service swallows it and returns the record unchanged.
    """


class RecordNotFound(DomainError):
    """Raised when an operation targets a record that does not exist."""


class ConfigurationError(DomainError):
    """Raised when system configuration cannot support a payroll run."""


class ConcurrencyConflict(DomainError):
    """Raised when two writers raced on the same attendance day."""


class PartialRunFailure(DomainError):
    """Raised on demand when some employees of a payroll run failed."""

    def __init__(self, message: str, *, failed: list[int]):
        super().__init__(message)
        self.failed = list(failed)
