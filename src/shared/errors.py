"""Exception taxonomy for the suite.

Setup errors are raised before any workflow starts. Workflow errors mean the
expected UI state was not reached, possibly after bounded retries. Report
validation errors subclass AssertionError so pytest reports them as plain
assertion failures.
"""

from typing import Iterable, Optional

__all__ = [
    'InvalidTransitionError',
    'MissingConfigError',
    'ReportParseError',
    'ReportValidationError',
    'RetryExhaustedError',
    'SeedingError',
    'UnknownAlertTypeError',
    'WorkflowError',
]


class MissingConfigError(RuntimeError):
    """Required environment variables are absent."""

    def __init__(self, names: Iterable[str], context: str = "configuration"):
        self.names = list(names)
        super().__init__(f"Missing required environment variable(s) for {context}: {', '.join(self.names)}")


class SeedingError(RuntimeError):
    """The seeding API rejected an event or could not be reached."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class UnknownAlertTypeError(ValueError):
    """An alert type name has no seeding payload."""


class WorkflowError(RuntimeError):
    """The application did not reach the expected UI state."""


class RetryExhaustedError(WorkflowError):
    """A bounded retry loop ran out of attempts."""

    def __init__(self, description: str, attempts: int):
        self.description = description
        self.attempts = attempts
        super().__init__(f"{description}: condition not met after {attempts} attempt(s)")


class InvalidTransitionError(WorkflowError):
    """An alert was asked to move along an edge its state machine does not allow."""

    def __init__(self, from_state, to_state, reason: str = ""):
        self.from_state = from_state
        self.to_state = to_state
        message = f"Invalid alert transition: {from_state.value} -> {to_state.value}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ReportParseError(ValueError):
    """A downloaded report file is missing, empty or of an unsupported format."""


class ReportValidationError(AssertionError):
    """Parsed report data failed one or more field checks."""

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None):
        self.errors = list(errors or [])
        super().__init__(message)
