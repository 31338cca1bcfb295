"""Expansion of tests into repeated runs."""

from typing import TYPE_CHECKING

from pytest_arbor.tree import TestRun

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from pytest_arbor.tree import Suite, Test


class Repeater:
    """Per-entity repeat counts compounding along the suite chain.

    A test runs `count(test) * count(parent) * ... * count(root)` times,
    where unset counts default to one. A zero count anywhere on the
    chain removes the test from the runs.
    """

    def __init__(self) -> None:
        self._repeat_count: dict[Test | Suite, int] = {}

    def repeat(self, test_or_suite: 'Test | Suite', count: int) -> None:
        self._repeat_count[test_or_suite] = count

    def count(self, test_or_suite: 'Test | Suite') -> int:
        """Return the recorded count, `1` when unset."""
        return self._repeat_count.get(test_or_suite, 1)

    def total(self, test: 'Test') -> int:
        """Return how many runs a test expands into."""
        repeat = self.count(test)
        for suite in test.ancestors():
            repeat *= self.count(suite)

        return repeat

    def create_test_runs(self, tests: 'Iterable[Test]') -> list[TestRun]:
        """Expand tests into runs, keeping runs of a test adjacent.

        Args:
            tests: Tests in execution order.

        Returns:
            Fresh run instances.
        """
        return [
            TestRun(test, index)
            for test in tests
            for index in range(self.total(test))
        ]
