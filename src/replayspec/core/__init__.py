"""
Core replayspec components.

This package provides the spec node model, failure records, and the type
aliases shared across the engine.
"""

from replayspec.core.spec_error import Location, SpecError
from replayspec.core.spec_node import SpecNode
from replayspec.core.types import DeclarationBody, SpecBody, SpecPath

__all__ = [
    "SpecNode",
    "SpecError",
    "Location",
    "SpecPath",
    "SpecBody",
    "DeclarationBody",
]
