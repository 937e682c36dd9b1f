"""
Spec nodes observed during a single pass.

Every call to `Context.specify` creates a fresh `SpecNode`. Nodes from
different passes that share a root name and path denote the same logical spec;
the result collector merges them.
"""

from dataclasses import dataclass, field
from typing import Optional

from replayspec.core.spec_error import SpecError
from replayspec.core.types import SpecPath


@dataclass(eq=False)
class SpecNode:
    """
    One declared spec as seen by one pass.

    Creating a node with a parent assigns it the parent's next child index,
    so siblings must share the same parent instance to get distinct paths.

    Params:
        name: Display label given at declaration
        parent: Enclosing spec, None for a root spec
    """

    name: str
    parent: Optional["SpecNode"] = None
    index: int | None = field(default=None, init=False)
    path: SpecPath = field(default=(), init=False)
    child_count: int = field(default=0, init=False)
    errors: list[SpecError] = field(default_factory=list, init=False)
    has_run: bool = field(default=False, init=False)

    def __post_init__(self):
        if self.parent is not None:
            self.index = self.parent.child_count
            self.parent.child_count += 1
            self.path = self.parent.path + (self.index,)

    def __repr__(self) -> str:
        return f"SpecNode({self.name!r}, path={self.path!r})"

    @property
    def root(self) -> "SpecNode":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def root_name(self) -> str:
        return self.root.name

    @property
    def depth(self) -> int:
        return len(self.path)

    @property
    def is_failing(self) -> bool:
        return bool(self.errors)

    def is_on_path_to(self, target: SpecPath) -> bool:
        """
        Check whether this node lies on the ancestor chain of a target.

        Params:
            target: Path of the node a pass is aiming for

        Returns:
            True if this node's path is a prefix of, or equal to, the target
        """
        return tuple(target[: len(self.path)]) == self.path

    def add_error(self, error: SpecError) -> bool:
        """
        Record a failure unless one with the same message is already present.

        Params:
            error: Failure to record

        Returns:
            True if the error was new for this node
        """
        if any(existing.message == error.message for existing in self.errors):
            return False
        self.errors.append(error)
        return True
