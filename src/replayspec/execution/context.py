"""
Execution context for a single pass over a spec tree.

A pass re-executes a root spec's declaration callback from scratch. The
context handed to that callback decides, for every nested `specify` call,
whether to enter the body or skip it, and attributes failures to whichever
spec is active when they are raised.
"""

from collections.abc import Callable

from replayspec.core.spec_error import Location, SpecError
from replayspec.core.spec_node import SpecNode
from replayspec.core.types import DeclarationBody, SpecPath
from replayspec.exceptions.core import InvalidSpecNameError, SpecStructureError
from replayspec.matchers import Expectation
from replayspec.models import RunnerConfig

ObservationSink = Callable[[SpecNode], None]


def validate_spec_name(name: object) -> str:
    """
    Validate a spec name.

    Params:
        name: Name given to `specify` or `Runner.add_spec`

    Returns:
        The name unchanged

    Raises:
        InvalidSpecNameError: If the name is not a string or is blank
    """
    if not isinstance(name, str):
        raise InvalidSpecNameError(name, "must be a string")
    if not name.strip():
        raise InvalidSpecNameError(name, "must not be blank")
    return name


class Context:
    """
    Traversal state of one pass, handed to the root spec's callback.

    The context tracks a single active spec. Entering a nested body makes its
    spec active; leaving the body, normally or by an exception, restores the
    parent. The innermost spec an exception escaped from is remembered so the
    runner can attribute the fault to it.

    Params:
        root: Root spec node of this pass
        target: Path of the spec this pass must reach; every spec on the way
            is entered, every other spec is only declared
        sink: Receives each spec node whenever it is declared or fails
        config: Runner settings
    """

    def __init__(
        self,
        root: SpecNode,
        target: SpecPath,
        sink: ObservationSink,
        config: RunnerConfig | None = None,
    ):
        self.root = root
        self.target = tuple(target)
        self.config = config or RunnerConfig()
        self.nodes: dict[SpecPath, SpecNode] = {root.path: root}
        self._sink = sink
        self._current = root
        self._fault: tuple[BaseException, SpecNode] | None = None
        self._closed = False

    @property
    def current(self) -> SpecNode:
        """The spec whose body is executing."""
        return self._current

    @property
    def closed(self) -> bool:
        return self._closed

    def specify(self, name: str, body: DeclarationBody) -> None:
        """
        Declare a nested spec under the active spec.

        Params:
            name: Display label of the nested spec
            body: Zero-argument callable; invoked only if the nested spec lies
                on the path to this pass's target

        Raises:
            SpecStructureError: If the pass this context belongs to has ended
            InvalidSpecNameError: If the name is not a non-blank string
        """
        if self._closed:
            raise SpecStructureError(
                f"Cannot declare '{name}': the pass targeting {self.target} has already ended"
            )
        validate_spec_name(name)

        parent = self._current
        child = SpecNode(name, parent=parent)
        self.nodes[child.path] = child
        child.has_run = child.is_on_path_to(self.target)
        self._sink(child)

        if not child.has_run:
            return

        self._current = child
        try:
            body()
        except BaseException as e:
            # innermost spec wins; outer specs see the same exception object
            if self._fault is None or self._fault[0] is not e:
                self._fault = (e, child)
            raise
        finally:
            self._current = parent

    declare = specify

    def then(self, actual) -> Expectation:
        """Start a non-fatal expectation on a value."""
        return Expectation(self, actual)

    def assume(self, actual) -> Expectation:
        """Start an expectation whose mismatch aborts the rest of the pass."""
        return Expectation(self, actual, fatal=True)

    def fail(self, message: str) -> None:
        """Record an unconditional failure on the active spec."""
        self.record_error(message)

    def record_error(self, message: str, location: Location | None = None) -> None:
        """
        Attach a failure to the active spec and forward it to the sink.

        Params:
            message: Failure text
            location: Source line of the failure; looked up from the call stack
                when omitted and location capture is enabled

        Raises:
            SpecStructureError: If the pass this context belongs to has ended
        """
        if location is None and self.config.capture_locations:
            location = Location.of_caller()
        self._record(self._current, SpecError(message, location))

    def faulted_spec(self, exc: BaseException) -> SpecNode:
        """
        Find the spec an exception was raised in.

        Params:
            exc: Exception that escaped into the root callback

        Returns:
            The innermost spec whose body the exception left, or the active
            spec if it was raised outside any nested body
        """
        if self._fault is not None and self._fault[0] is exc:
            return self._fault[1]
        return self._current

    def record_exception(self, exc: BaseException) -> None:
        """
        Attach an unexpected exception to the spec it was raised in.

        Params:
            exc: The exception that aborted the pass
        """
        location = Location.of_exception(exc) if self.config.capture_locations else None
        if location is None and self.config.capture_locations:
            location = Location.of_caller()
        text = str(exc)
        message = f"{type(exc).__name__}: {text}" if text else type(exc).__name__
        self._record(self.faulted_spec(exc), SpecError(message, location))

    def _record(self, spec: SpecNode, error: SpecError) -> None:
        if self._closed:
            raise SpecStructureError(
                f"Cannot record '{error.message}': the pass targeting {self.target} has already ended"
            )
        if spec.add_error(error):
            self._sink(spec)

    def find(self, path: SpecPath) -> SpecNode | None:
        """Return the spec declared at `path` during this pass, if any."""
        return self.nodes.get(tuple(path))

    def close(self) -> None:
        self._closed = True
