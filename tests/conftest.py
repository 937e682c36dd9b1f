"""
Shared test fixtures for the replayspec test suite.
"""

import textwrap

import pytest

from replayspec import ResultCollector, Runner, render_report


@pytest.fixture
def runner():
    """A runner with default configuration."""
    return Runner()


@pytest.fixture
def collector():
    """An empty result collector."""
    return ResultCollector()


@pytest.fixture
def assert_report_is():
    """Compare a collector's rendered report with an indented expected block.

    Usage:
        def test_something(collector, assert_report_is):
            assert_report_is(collector, '''
                - RootSpec

                1 specs, 0 failures
            ''')
    """

    def check(results, expected, **render_options):
        report = render_report(results, **render_options)
        assert report == textwrap.dedent(expected).lstrip("\n")

    return check
