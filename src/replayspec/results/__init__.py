"""
replayspec result components.

This package provides the canonical result tree and its text rendering.
"""

from replayspec.results.collector import ResultCollector, ResultNode, ResultVisitor
from replayspec.results.printer import Printer, render_report

__all__ = [
    "ResultCollector",
    "ResultNode",
    "ResultVisitor",
    "Printer",
    "render_report",
]
