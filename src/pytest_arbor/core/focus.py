"""Focus-based test selection."""

from typing import TYPE_CHECKING

from pytest_arbor.tree import Expectations

if TYPE_CHECKING:
    from collections.abc import Sequence

if TYPE_CHECKING:
    from pytest_arbor.tree import Suite, Test


class FocusedFilter:
    """Narrow a test list to explicitly focused tests and suites.

    A focused test is selected on its own. A focused suite selects every
    test below it, unless the suite is also an ancestor of a directly
    focused test: then only the focused test is pulled in, not its
    unfocused siblings.
    """

    def __init__(self) -> None:
        self._focused: set[Test | Suite] = set()

    def mark_focused(self, test_or_suite: 'Test | Suite') -> None:
        self._focused.add(test_or_suite)

    def has_focused_tests_or_suites(self) -> bool:
        return bool(self._focused)

    def focused_tests(self, tests: 'Sequence[Test]') -> list['Test']:
        return [test for test in tests if test in self._focused]

    def focused_suites(self, suites: 'Sequence[Suite]') -> list['Suite']:
        return [suite for suite in suites if suite in self._focused]

    def filter(self, tests: 'Sequence[Test]') -> 'Sequence[Test]':
        """Select the tests to run.

        Focused tests and focused suites are made runnable: their skip
        flag is cleared and they are expected to pass.

        Args:
            tests: Candidate tests in execution order.

        Returns:
            The input itself when nothing is focused, otherwise the
            selected tests in input order.
        """
        if not self.has_focused_tests_or_suites():
            return tests

        ignored_suites: set[Suite] = set()
        for test in tests:
            focused_test = test in self._focused
            if focused_test:
                test.set_skipped(False)
                test.set_expectation(Expectations.OK)

            for suite in test.ancestors():
                if suite in self._focused:
                    suite.set_skipped(False)
                    suite.set_expectation(Expectations.OK)
                # Ancestors of a focused test must not select its siblings.
                if focused_test:
                    ignored_suites.add(suite)

        return [
            test
            for test in tests
            if test in self._focused or any(
                suite in self._focused and suite not in ignored_suites
                for suite in test.ancestors()
            )
        ]
