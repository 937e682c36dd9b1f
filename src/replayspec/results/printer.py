"""
Text report rendering.

Output format:

    - RootSpec [FAIL]
        Expected '20' but was '10'
      - Child A

    2 specs, 1 failures

Each spec is indented two spaces per level; error lines sit two spaces past
the spec name. The blank line and summary always close the report, and an
empty tree renders as the summary line alone.
"""

import io
import sys
from typing import TextIO

from replayspec.core.spec_error import SpecError
from replayspec.exceptions.core import ErrorLevel
from replayspec.models import ReportSummary
from replayspec.results.collector import ResultCollector, ResultNode, ResultVisitor

INDENT = "  "


class Printer(ResultVisitor):
    """Writes the canonical tree to a text stream as an indented outline."""

    def __init__(self, out: TextIO | None = None, error_level: ErrorLevel = ErrorLevel.USER):
        self.out = out if out is not None else sys.stdout
        self.error_level = error_level
        self._depth = 0
        self._printed_specs = False

    def enter_spec(self, spec: ResultNode) -> None:
        marker = " [FAIL]" if spec.is_failing else ""
        self._write_line(self._depth, f"- {spec.name}{marker}")
        self._depth += 1
        self._printed_specs = True

    def visit_error(self, spec: ResultNode, error: SpecError) -> None:
        # _depth already points one level below the spec's own line
        self._write_line(self._depth + 1, error.message)
        location = error.format_location(self.error_level)
        if location:
            self._write_line(self._depth + 2, location)

    def exit_spec(self, spec: ResultNode) -> None:
        self._depth -= 1

    def visit_end(self, summary: ReportSummary) -> None:
        if self._printed_specs:
            self.out.write("\n")
        self.out.write(f"{summary}\n")
        self._depth = 0
        self._printed_specs = False

    def _write_line(self, depth: int, text: str) -> None:
        self.out.write(f"{INDENT * depth}{text}\n")


def render_report(results: ResultCollector, error_level: ErrorLevel = ErrorLevel.USER) -> str:
    """
    Render a result collector to text.

    Params:
        results: Collector to render
        error_level: USER for the plain format, DEVELOPER to add source locations

    Returns:
        The full report, ending with the summary line and a newline
    """
    out = io.StringIO()
    results.visit(Printer(out, error_level=error_level))
    return out.getvalue()
