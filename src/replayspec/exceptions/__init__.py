"""
replayspec exception classes.

This package provides all exception types used throughout replayspec for
consistent error handling and reporting.
"""

from replayspec.exceptions.core import (
    AssumptionFailedError,
    DuplicateSpecError,
    ErrorLevel,
    InvalidSpecNameError,
    ReplaySpecError,
    SpecStructureError,
)

__all__ = [
    "ErrorLevel",
    "ReplaySpecError",
    "InvalidSpecNameError",
    "DuplicateSpecError",
    "SpecStructureError",
    "AssumptionFailedError",
]
