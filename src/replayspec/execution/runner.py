"""
Replay scheduler for spec trees.

A root spec's callback is plain imperative code: nested `specify` calls share
whatever local state the callback sets up. Running two sibling bodies in one
execution would let them see each other's mutations, so the runner never does
that. Instead it executes the whole callback once per spec in the tree, each
time entering only the ancestor chain of that one spec.

Discovery is breadth first over paths. The first pass targets the root and
only records the root's direct children. Each later pass targets one known
spec, runs its body, and schedules every child it declared. The number of
passes for a root therefore equals the number of specs in its tree.
"""

import logging
from collections import deque

from replayspec.core.spec_node import SpecNode
from replayspec.core.types import SpecBody, SpecPath
from replayspec.exceptions.core import AssumptionFailedError, DuplicateSpecError
from replayspec.execution.context import Context, validate_spec_name
from replayspec.models import RunnerConfig
from replayspec.results.collector import ResultCollector
from replayspec.results.printer import render_report


class Runner:
    """Registers root specs and drives them through replayed passes.

    Responsibilities:
      - Keep the registered root specs and their declaration callbacks.
      - Schedule one pass per discovered spec, breadth first.
      - Turn faults inside a pass, `SystemExit` included, into recorded
        failures so that `run()` itself never raises because of spec code.
        `KeyboardInterrupt` still stops the run.

    Notes:
      - State captured by a callback from outside its own invocation is not
        reset between passes. Mutable state that must be isolated per pass
        belongs inside the callback.
    """

    def __init__(self, config: RunnerConfig | None = None):
        self.config = config or RunnerConfig()
        self.executed_passes: list[tuple[str, SpecPath]] = []
        self._specs: dict[str, SpecBody] = {}
        self._results = ResultCollector()

    def add_spec(self, name: str, body: SpecBody) -> None:
        """
        Register a root spec without running it.

        Params:
            name: Root spec name, unique within this runner
            body: Declaration callback, called with a `Context` once per pass

        Raises:
            InvalidSpecNameError: If the name is not a non-blank string
            DuplicateSpecError: If a root spec with this name is registered
        """
        validate_spec_name(name)
        if name in self._specs:
            raise DuplicateSpecError(name)
        self._specs[name] = body

    def run(self) -> ResultCollector:
        """
        Execute every registered root spec to completion.

        Returns:
            The result collector holding the merged tree of all passes
        """
        for name, body in self._specs.items():
            self._run_spec(name, body)
        return self._results

    def results(self) -> ResultCollector:
        return self._results

    def report(self) -> str:
        """Render the current results at the configured error level."""
        return render_report(self._results, error_level=self.config.error_level)

    def _run_spec(self, name: str, body: SpecBody) -> None:
        root: SpecPath = ()
        queue: deque[SpecPath] = deque([root])
        scheduled: set[SpecPath] = {root}

        while queue:
            target = queue.popleft()
            reached = self._execute_pass(name, body, target)
            if reached is None:
                logging.warning(
                    f"Pass for spec '{name}' did not reach its target {target}; "
                    "its children were not scheduled"
                )
                continue

            for index in range(reached.child_count):
                child = target + (index,)
                if child not in scheduled:
                    scheduled.add(child)
                    queue.append(child)
                    logging.debug(f"Scheduled target {child} of spec '{name}'")

    def _execute_pass(self, name: str, body: SpecBody, target: SpecPath) -> SpecNode | None:
        """
        Run one pass of a root spec.

        Params:
            name: Root spec name
            body: Declaration callback
            target: Path of the spec whose body this pass must execute

        Returns:
            The spec node at `target` if the pass declared it, otherwise None
        """
        self.executed_passes.append((name, target))
        logging.debug(f"Pass {len(self.executed_passes)}: spec '{name}' targeting {target}")

        root = SpecNode(name)
        root.has_run = True
        context = Context(root, target, self._results.update, self.config)
        self._results.update(root)

        try:
            body(context)
        except AssumptionFailedError as e:
            logging.debug(f"Pass targeting {target} of spec '{name}' stopped by assumption: {e}")
        except (Exception, SystemExit) as e:
            faulted = context.faulted_spec(e)
            context.record_exception(e)
            logging.warning(
                f"Pass targeting {target} of spec '{name}' aborted in '{faulted.name}': "
                f"{type(e).__name__}: {e}"
            )
        finally:
            context.close()

        return context.find(target)
