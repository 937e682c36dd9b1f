"""
replayspec - nested behavior specs with replayed, isolated execution

Specs are declared with ordinary nested function calls. Every spec in the tree
gets its own execution of the declaration callback, so sibling specs never
observe each other's state, and the results of all executions are merged into
one report.
"""

from importlib.metadata import version

from replayspec.core import SpecError, SpecNode
from replayspec.exceptions import ErrorLevel
from replayspec.execution import Context, Runner
from replayspec.models import ReportSummary, RunnerConfig
from replayspec.results import Printer, ResultCollector, render_report

__version__ = version("replayspec")

__all__ = [
    "__version__",
    "Runner",
    "Context",
    "RunnerConfig",
    "ResultCollector",
    "ReportSummary",
    "Printer",
    "render_report",
    "SpecNode",
    "SpecError",
    "ErrorLevel",
]
