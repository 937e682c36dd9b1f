"""
Exception classes for replayspec.

This module defines the exception types raised while registering and
executing spec trees, along with the detail level used when reporting
recorded failures.
"""

from enum import Enum


class ErrorLevel(Enum):
    """Report detail level for end users vs developers."""

    USER = "user"  # Failure messages only
    DEVELOPER = "developer"  # Failure messages plus source locations


class ReplaySpecError(Exception):
    """Base exception for all replayspec errors."""

    pass


class InvalidSpecNameError(ReplaySpecError):
    """Raised when a spec is declared with an unusable name."""

    def __init__(self, name: object, reason: str):
        """
        Initialize the exception.

        Params:
            name: The rejected name, as given by the caller
            reason: Why the name was rejected
        """
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid spec name {name!r}: {reason}")


class DuplicateSpecError(ReplaySpecError):
    """Raised when two root specs with the same name are added to one runner."""

    def __init__(self, name: str):
        """
        Initialize the exception.

        Params:
            name: The root spec name that is already registered
        """
        self.name = name
        super().__init__(f"Root spec '{name}' is already registered")


class SpecStructureError(ReplaySpecError):
    """Raised when a context is used outside of the pass it belongs to."""

    def __init__(self, message: str):
        super().__init__(message)


class AssumptionFailedError(ReplaySpecError):
    """
    Raised by a fatal expectation to abort the remainder of a pass.

    The failure message has already been recorded on the active spec when this
    is raised, so the runner swallows it without recording it a second time.
    """

    def __init__(self, message: str):
        """
        Initialize the exception.

        Params:
            message: The failure message that was recorded
        """
        self.message = message
        super().__init__(message)
