"""
Tests for the replay scheduler.

This module tests end-to-end runs:
- Breadth-first discovery with one pass per spec
- Error merging across replayed passes
- Isolation of sibling specs and fault containment
"""

import logging
import sys

import pytest

from replayspec import Runner
from replayspec.exceptions import (
    AssumptionFailedError,
    DuplicateSpecError,
    InvalidSpecNameError,
    SpecStructureError,
)


def spec_with_multiple_nested_children(c):
    c.specify("Child A", lambda: (
        c.specify("Child AA", lambda: None),
        c.specify("Child AB", lambda: None),
    ))
    c.specify("Child B", lambda: (
        c.specify("Child BA", lambda: None),
        c.specify("Child BB", lambda: None),
        c.specify("Child BC", lambda: None),
    ))


class TestDiscovery:
    """Test that the whole tree is found with one pass per spec."""

    def test_multiple_nested_children(self, runner, assert_report_is):
        runner.add_spec("DummySpecWithMultipleNestedChildren", spec_with_multiple_nested_children)
        runner.run()

        assert_report_is(
            runner.results(),
            """
            - DummySpecWithMultipleNestedChildren
              - Child A
                - Child AA
                - Child AB
              - Child B
                - Child BA
                - Child BB
                - Child BC

            8 specs, 0 failures
            """,
        )

    def test_one_pass_per_spec_breadth_first(self, runner):
        runner.add_spec("Root", spec_with_multiple_nested_children)
        runner.run()

        assert [target for _, target in runner.executed_passes] == [
            (),
            (0,),
            (1,),
            (0, 0),
            (0, 1),
            (1, 0),
            (1, 1),
            (1, 2),
        ]

    def test_every_spec_is_marked_run(self, runner):
        runner.add_spec("Root", spec_with_multiple_nested_children)
        results = runner.run()

        assert all(node.has_run for root in results.roots() for node in root.walk())

    def test_root_specs_are_independent(self, runner, assert_report_is):
        runner.add_spec("RootSpec2", lambda c: c.specify("Only", lambda: None))
        runner.add_spec("RootSpec1", lambda c: None)
        runner.run()

        assert_report_is(
            runner.results(),
            """
            - RootSpec1
            - RootSpec2
              - Only

            3 specs, 0 failures
            """,
        )
        assert runner.executed_passes == [
            ("RootSpec2", ()),
            ("RootSpec2", (0,)),
            ("RootSpec1", ()),
        ]

    def test_no_specs(self, runner, assert_report_is):
        runner.run()
        assert_report_is(runner.results(), "0 specs, 0 failures\n")


class TestIsolation:
    """Test that each pass enters only the ancestor chain of its target."""

    def test_siblings_never_share_a_pass(self, runner):
        entered = []

        def spec(c):
            entered.append([])
            c.specify("A", lambda: entered[-1].append("A"))
            c.specify("B", lambda: (
                entered[-1].append("B"),
                c.specify("BA", lambda: entered[-1].append("BA")),
            ))

        runner.add_spec("Root", spec)
        runner.run()

        assert entered == [[], ["A"], ["B"], ["B", "BA"]]

    def test_local_state_is_fresh_each_pass(self, runner):
        """State created inside the callback is rebuilt for every pass."""

        def spec(c):
            items = []
            c.specify("adds one", lambda: items.append(1))
            c.specify("adds two", lambda: items.append(2))
            c.then(len(items) <= 1).should.be_true()

        runner.add_spec("Root", spec)
        results = runner.run()

        assert results.is_passing


class TestErrorMerging:
    """Test failures observed over several passes."""

    def test_spec_passes_on_first_run_but_fails_on_second(self, runner, assert_report_is):
        """State outside the callback is not reset between passes."""
        passes = {"count": 0}

        def spec(c):
            if passes["count"] == 1:
                c.then(10).should.equal(20)
            passes["count"] += 1
            c.specify("Child A", lambda: None)
            c.specify("Child B", lambda: None)

        runner.add_spec("RootSpec", spec)
        runner.run()

        assert_report_is(
            runner.results(),
            """
            - RootSpec [FAIL]
                Expected '20' but was '10'
              - Child A
              - Child B

            3 specs, 1 failures
            """,
        )

    def test_root_spec_fails_sporadically(self, runner, assert_report_is):
        def spec(c):
            state = {"i": 0}
            c.specify("Child A", lambda: state.update(i=1))
            c.specify("Child B", lambda: state.update(i=2))
            c.then(10).should.equal(20)  # same in every pass
            c.then(10 + state["i"]).should.equal(20)  # differs per pass

        runner.add_spec("RootSpec", spec)
        runner.run()

        assert_report_is(
            runner.results(),
            """
            - RootSpec [FAIL]
                Expected '20' but was '10'
                Expected '20' but was '11'
                Expected '20' but was '12'
              - Child A
              - Child B

            3 specs, 1 failures
            """,
        )

    def test_non_root_spec_fails_sporadically(self, runner, assert_report_is):
        def spec(c):
            def failing():
                state = {"i": 0}
                c.specify("Child A", lambda: state.update(i=1))
                c.specify("Child B", lambda: state.update(i=2))
                c.then(10).should.equal(20)
                c.then(10 + state["i"]).should.equal(20)

            c.specify("Failing", failing)

        runner.add_spec("RootSpec", spec)
        runner.run()

        assert_report_is(
            runner.results(),
            """
            - RootSpec
              - Failing [FAIL]
                  Expected '20' but was '10'
                  Expected '20' but was '11'
                  Expected '20' but was '12'
                - Child A
                - Child B

            4 specs, 1 failures
            """,
        )

    def test_failure_continues_body(self, runner):
        """A non-fatal mismatch does not stop the rest of the body."""

        def spec(c):
            c.then(1).should.equal(2)
            c.specify("Declared after failure", lambda: None)

        runner.add_spec("Root", spec)
        results = runner.run()

        assert results.total_specs == 2
        assert results.find("Root", (0,)).has_run


class TestFaultContainment:
    """Test exceptions raised from spec code."""

    def test_exception_is_recorded_on_active_spec(self, runner, assert_report_is):
        def spec(c):
            c.specify("Broken", lambda: {}["missing"])
            c.specify("Fine", lambda: None)

        runner.add_spec("Root", spec)
        runner.run()

        assert_report_is(
            runner.results(),
            """
            - Root
              - Broken [FAIL]
                  KeyError: 'missing'
              - Fine

            3 specs, 1 failures
            """,
        )

    def test_exception_aborts_only_its_pass(self, runner):
        def explode():
            raise RuntimeError("boom")

        def spec(c):
            c.specify("A", explode)
            c.specify("B", lambda: c.specify("BA", lambda: None))

        runner.add_spec("Root", spec)
        results = runner.run()

        assert len(runner.executed_passes) == 4
        assert [e.message for e in results.find("Root", (0,)).errors] == ["RuntimeError: boom"]
        assert results.find("Root", (1, 0)).has_run
        assert results.total_failures == 1

    def test_root_exception_recorded_once(self, runner, assert_report_is):
        """The same fault repeated by every pass is reported once."""

        def spec(c):
            c.specify("A", lambda: None)
            raise ValueError("root setup failed")

        runner.add_spec("Root", spec)
        runner.run()

        assert_report_is(
            runner.results(),
            """
            - Root [FAIL]
                ValueError: root setup failed
              - A

            2 specs, 1 failures
            """,
        )

    def test_exception_without_message(self, runner):
        def spec(c):
            raise NotImplementedError

        runner.add_spec("Root", spec)
        results = runner.run()

        assert results.find("Root").errors[0].message == "NotImplementedError"

    def test_exception_records_raising_location(self, runner):
        def spec(c):
            raise ValueError("here")

        runner.add_spec("Root", spec)
        results = runner.run()

        location = results.find("Root").errors[0].location
        assert location.function == "spec"
        assert location.file.endswith("test_runner.py")

    def test_fault_is_logged(self, runner, caplog):
        runner.add_spec("Root", lambda c: 1 / 0)

        with caplog.at_level(logging.WARNING):
            runner.run()

        assert "ZeroDivisionError" in caplog.text

    def test_caught_nested_failure_keeps_tree_shape(self, runner, assert_report_is):
        """Declaration code that catches a nested failure still declares siblings correctly."""

        def spec(c):
            try:
                c.specify("A", lambda: c.assume(1).should.equal(2))
            except AssumptionFailedError:
                pass
            c.specify("B", lambda: None)

        runner.add_spec("Root", spec)
        runner.run()

        assert_report_is(
            runner.results(),
            """
            - Root
              - A [FAIL]
                  Expected '2' but was '1'
              - B

            3 specs, 1 failures
            """,
        )
        assert [target for _, target in runner.executed_passes] == [(), (0,), (1,)]

    def test_system_exit_is_recorded(self, runner):
        def spec(c):
            c.specify("Exits", lambda: sys.exit(3))
            c.specify("After", lambda: None)

        runner.add_spec("Root", spec)
        results = runner.run()

        assert [e.message for e in results.find("Root", (0,)).errors] == ["SystemExit: 3"]
        assert results.find("Root", (1,)).has_run

    def test_context_kept_after_run_cannot_change_results(self, runner):
        saved = []
        runner.add_spec("Root", lambda c: saved.append(c))
        results = runner.run()

        with pytest.raises(SpecStructureError):
            saved[0].then(1).should.equal(2)

        assert results.total_failures == 0

    def test_failed_assumption_stops_pass(self, runner, assert_report_is):
        def spec(c):
            c.assume(1).should.equal(2)
            c.specify("Never declared", lambda: None)

        runner.add_spec("Root", spec)
        runner.run()

        assert_report_is(
            runner.results(),
            """
            - Root [FAIL]
                Expected '2' but was '1'

            1 specs, 1 failures
            """,
        )

    def test_invalid_nested_name_is_recorded(self, runner):
        runner.add_spec("Root", lambda c: c.specify("  ", lambda: None))
        results = runner.run()

        assert results.find("Root").errors[0].message == (
            "InvalidSpecNameError: Invalid spec name '  ': must not be blank"
        )

    def test_unreached_target_is_logged(self, runner, caplog):
        """A spec that disappears between passes is kept but not expanded."""
        passes = {"count": 0}

        def spec(c):
            passes["count"] += 1
            if passes["count"] == 1:
                c.specify("Only on first pass", lambda: c.specify("Never seen", lambda: None))

        runner.add_spec("Root", spec)
        with caplog.at_level(logging.WARNING):
            results = runner.run()

        assert "did not reach its target (0,)" in caplog.text
        assert results.total_specs == 2


class TestRegistration:
    """Test add_spec validation."""

    def test_duplicate_root_name(self, runner):
        runner.add_spec("Root", lambda c: None)
        with pytest.raises(DuplicateSpecError):
            runner.add_spec("Root", lambda c: None)

    def test_non_string_name(self, runner):
        with pytest.raises(InvalidSpecNameError):
            runner.add_spec(42, lambda c: None)

    def test_add_spec_does_not_run(self, runner):
        calls = []
        runner.add_spec("Root", lambda c: calls.append(c))

        assert calls == []
        assert runner.results().total_specs == 0

    def test_run_returns_results(self, runner):
        runner.add_spec("Root", lambda c: None)
        assert runner.run() is runner.results()
