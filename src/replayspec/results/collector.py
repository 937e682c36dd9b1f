"""
Canonical result tree merged from the observations of every pass.

Each pass produces its own `SpecNode` objects. The collector folds them into
one `ResultNode` per logical spec, identified by root name and path, so the
same spec observed by many passes appears once in the report.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field

from replayspec.core.spec_error import SpecError
from replayspec.core.spec_node import SpecNode
from replayspec.core.types import SpecPath
from replayspec.models import ReportSummary


@dataclass(eq=False)
class ResultNode:
    """Merged state of one logical spec across all passes."""

    name: str
    path: SpecPath = ()
    index: int | None = None
    child_count: int = 0
    errors: list[SpecError] = field(default_factory=list)
    has_run: bool = False
    children: dict[int, "ResultNode"] = field(default_factory=dict)

    @property
    def is_failing(self) -> bool:
        return bool(self.errors)

    @property
    def depth(self) -> int:
        return len(self.path)

    def ordered_children(self) -> list["ResultNode"]:
        """Children in declaration order."""
        return [self.children[index] for index in sorted(self.children)]

    def add_error(self, error: SpecError) -> bool:
        if any(existing.message == error.message for existing in self.errors):
            return False
        self.errors.append(error)
        return True

    def walk(self) -> Iterator["ResultNode"]:
        """Pre-order traversal of this node and its descendants."""
        yield self
        for child in self.ordered_children():
            yield from child.walk()


class ResultVisitor(ABC):
    """Receives the canonical tree in report order from `ResultCollector.visit`."""

    @abstractmethod
    def enter_spec(self, spec: ResultNode) -> None:
        """Called before the spec's errors and children."""

    @abstractmethod
    def visit_error(self, spec: ResultNode, error: SpecError) -> None:
        """Called once per distinct error of the spec, in first-seen order."""

    @abstractmethod
    def exit_spec(self, spec: ResultNode) -> None:
        """Called after all of the spec's children."""

    @abstractmethod
    def visit_end(self, summary: ReportSummary) -> None:
        """Called once after the whole tree."""


class ResultCollector:
    """
    Merges spec node observations into a single canonical tree.

    Root specs are keyed by name and reported alphabetically. Below a root,
    specs are keyed by their declaration index and reported in declaration
    order.
    """

    def __init__(self):
        self._roots: dict[str, ResultNode] = {}

    def update(self, node: SpecNode) -> ResultNode:
        """
        Fold one observation into the canonical tree.

        Repeating an observation is harmless: the node is created only the
        first time its path is seen, and errors whose message is already
        recorded for that spec are ignored.

        Params:
            node: Spec node observed by some pass; its parent chain locates it

        Returns:
            The canonical node the observation was merged into
        """
        result = self._ensure(node)
        if not result.name:
            result.name = node.name
        result.has_run = result.has_run or node.has_run
        result.child_count = max(result.child_count, node.child_count)
        for error in node.errors:
            result.add_error(error)
        return result

    def _ensure(self, node: SpecNode) -> ResultNode:
        if node.parent is None:
            root = self._roots.get(node.name)
            if root is None:
                root = self._roots[node.name] = ResultNode(name=node.name)
            return root

        parent = self._ensure(node.parent)
        child = parent.children.get(node.index)
        if child is None:
            child = ResultNode(name=node.name, path=node.path, index=node.index)
            parent.children[node.index] = child
            parent.child_count = max(parent.child_count, node.index + 1)
        return child

    def roots(self) -> list[ResultNode]:
        """Root specs in report order."""
        return sorted(self._roots.values(), key=lambda root: root.name)

    def find(self, root_name: str, path: SpecPath = ()) -> ResultNode | None:
        """
        Look up a canonical node.

        Params:
            root_name: Name of the root spec
            path: Child indices below the root

        Returns:
            The node, or None if no pass has observed it
        """
        node = self._roots.get(root_name)
        for index in path:
            if node is None:
                return None
            node = node.children.get(index)
        return node

    def _all_nodes(self) -> Iterator[ResultNode]:
        for root in self.roots():
            yield from root.walk()

    @property
    def total_specs(self) -> int:
        return sum(1 for _ in self._all_nodes())

    @property
    def total_failures(self) -> int:
        return sum(1 for node in self._all_nodes() if node.is_failing)

    @property
    def is_passing(self) -> bool:
        return self.total_failures == 0

    def summary(self) -> ReportSummary:
        return ReportSummary(total_specs=self.total_specs, total_failures=self.total_failures)

    def visit(self, visitor: ResultVisitor) -> None:
        """
        Push the canonical tree through a visitor.

        Params:
            visitor: Receives every spec in pre-order, then the summary
        """
        for root in self.roots():
            self._visit_node(root, visitor)
        visitor.visit_end(self.summary())

    def _visit_node(self, node: ResultNode, visitor: ResultVisitor) -> None:
        visitor.enter_spec(node)
        for error in node.errors:
            visitor.visit_error(node, error)
        for child in node.ordered_children():
            self._visit_node(child, visitor)
        visitor.exit_spec(node)
