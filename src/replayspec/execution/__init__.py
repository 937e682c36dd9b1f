"""
replayspec execution components.

This package provides the per-pass execution context and the runner that
schedules replayed passes over each root spec.
"""

from replayspec.execution.context import Context, validate_spec_name
from replayspec.execution.runner import Runner

__all__ = [
    "Context",
    "Runner",
    "validate_spec_name",
]
