"""
Core type definitions for replayspec.

This module contains the type aliases shared by the execution engine and the
result collector.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from replayspec.execution.context import Context

SpecPath = tuple[int, ...]

SpecBody = Callable[["Context"], Any]

DeclarationBody = Callable[[], Any]
