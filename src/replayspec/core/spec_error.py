"""
Failure records attached to spec nodes.

A `SpecError` is the unit of failure reported for a spec: the message text,
which is also its identity for de-duplication, plus the user source location
that produced it.
"""

import traceback
from functools import lru_cache
from pathlib import Path

from attrs import frozen

from replayspec.exceptions.core import ErrorLevel

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


@lru_cache(maxsize=None)
def _is_internal(filename: str) -> bool:
    try:
        Path(filename).resolve().relative_to(_PACKAGE_DIR)
    except ValueError:
        return False
    return True


@frozen
class Location:
    """A line of user code, as reported alongside a failure."""

    file: str
    line: int
    function: str | None = None

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"

    @classmethod
    def of_caller(cls) -> "Location | None":
        """
        Locate the innermost stack frame that lies outside replayspec.

        Returns:
            Location of the user code that called into the package, or None if
            every frame on the stack belongs to the package
        """
        for frame in reversed(traceback.extract_stack()):
            if not _is_internal(frame.filename):
                return cls(frame.filename, frame.lineno or 0, frame.name)
        return None

    @classmethod
    def of_exception(cls, exc: BaseException) -> "Location | None":
        """
        Locate the line that raised an exception.

        Params:
            exc: Exception carrying a traceback

        Returns:
            Location of the innermost traceback entry, or None without a traceback
        """
        frames = traceback.extract_tb(exc.__traceback__)
        if not frames:
            return None
        frame = frames[-1]
        return cls(frame.filename, frame.lineno or 0, frame.name)


@frozen
class SpecError:
    """
    One failure recorded against a spec.

    Params:
        message: Failure text; two errors with equal text are the same failure
        location: Where the failure was raised, if known
    """

    message: str
    location: Location | None = None

    def __str__(self) -> str:
        return self.message

    def format_location(self, error_level: ErrorLevel) -> str | None:
        """
        Format the location line for a report.

        Params:
            error_level: Whether to show USER or DEVELOPER level details

        Returns:
            "at <file>:<line>" at DEVELOPER level when a location is known,
            otherwise None
        """
        if error_level == ErrorLevel.DEVELOPER and self.location is not None:
            return f"at {self.location}"
        return None
