"""Spec module loading and run planning.

A `Runtime` wires a collector, a focused filter and a repeater together
with the built-in vocabulary, executes spec modules each in its own
anonymous suite and turns the collected tests into the runs to execute.
"""

from runpy import run_path
from typing import TYPE_CHECKING
from warnings import warn

from pytest_arbor.builtins import install
from pytest_arbor.core import FocusedFilter, Repeater, SuiteScope, TestCollector
from pytest_arbor.errors import ArborError, FocusError, FocusWarning, SpecLoadError
from pytest_arbor.location import Location
from pytest_arbor.settings import ArborSettings
from pytest_arbor.tree import Suite

if TYPE_CHECKING:
    from collections.abc import Sequence
    from os import PathLike

if TYPE_CHECKING:
    from pytest_arbor.tree import Test, TestRun


class Runtime:
    """Construction and selection pipeline for one session.

    Attributes:
        settings: Resolved runtime settings.
        collector: Collector shared by every loaded spec module.
        focused_filter: Filter fed by the `focus` attribute.
        repeater: Repeater fed by the `repeat` modifier.
    """

    def __init__(self, settings: ArborSettings | None = None) -> None:
        """Initialize the pipeline.

        Args:
            settings: Runtime settings, resolved from the environment
                when omitted.
        """
        if settings is None:
            settings = ArborSettings()

        self.settings = settings

        self.collector = TestCollector(settings=settings)
        self.focused_filter = FocusedFilter()
        self.repeater = Repeater()

        install(self.collector, self.focused_filter, self.repeater)

    def load(self, path: 'str | PathLike[str]') -> list['Test']:
        """Execute a spec module declaring suites and tests.

        The module body runs as the body of an anonymous suite placed
        under the collector root: the scope entry points (`describe`,
        `it`, hooks and aliases) are available as globals, and hooks
        declared at module level only apply to the module tests.

        Args:
            path: Path of the Python spec module.

        Returns:
            Tests declared by the module, in declaration order.

        Raises:
            SpecLoadError: If the module cannot be read or raises while
                declaring the tree.
        """
        tests = self.collector.tests()
        start = len(tests)

        suite = Suite(self.collector.root, '', Location(file_path=str(path)))
        scope = SuiteScope(self.collector, suite)

        try:
            run_path(str(path), init_globals=scope.namespace())

        except ArborError:
            raise

        except Exception as base:
            location = _error_location(base, path)
            raise SpecLoadError.from_location(
                f'Failed to load spec module {str(path)!r}',
                location,
                error=base,
            ) from base

        self.collector.register_suite(suite)

        return tests[start:]

    def check_focus(self, tests: 'Sequence[Test]') -> None:
        """Apply the focus policy.

        Args:
            tests: Collected tests, used to report focused entities.

        Raises:
            FocusError: If entities are focused and focus is forbidden.
        """
        if not self.focused_filter.has_focused_tests_or_suites():
            return

        entities = [
            *self.focused_filter.focused_suites(self.collector.suites()),
            *self.focused_filter.focused_tests(tests),
        ]
        names = [entity.full_name() for entity in entities]

        if self.settings.forbid_focus:
            raise FocusError.from_location(
                'Focused suites or tests are forbidden',
                entities[0].location() if entities else Location(),
                element={'focused': names},
            )

        warn(
            f'Running focused suites and tests only: {', '.join(map(repr, names))}',
            category=FocusWarning,
            stacklevel=2,
        )

    def select(self, tests: 'Sequence[Test] | None' = None) -> 'Sequence[Test]':
        """Apply the focus policy and the focused filter.

        Args:
            tests: Candidate tests; every collected test by default.

        Returns:
            Selected tests in input order.

        Raises:
            FocusError: If entities are focused and focus is forbidden.
        """
        if tests is None:
            tests = self.collector.tests()

        self.check_focus(tests)

        return self.focused_filter.filter(tests)

    def plan(self, tests: 'Sequence[Test] | None' = None) -> list['TestRun']:
        """Select tests and expand them into runs.

        Args:
            tests: Candidate tests; every collected test by default.

        Returns:
            Runs to execute, in execution order.

        Raises:
            FocusError: If entities are focused and focus is forbidden.
        """
        return self.repeater.create_test_runs(self.select(tests))


def _error_location(error: BaseException, path: 'str | PathLike[str]') -> Location:
    """Find the innermost traceback frame inside the spec module."""
    if isinstance(error, SyntaxError) and error.filename:
        return Location(file_path=error.filename, line_number=error.lineno or 0)

    filename = str(path)
    location = Location(file_path=filename)

    traceback = error.__traceback__
    while traceback is not None:
        code = traceback.tb_frame.f_code
        if code.co_filename == filename:
            location = Location(
                file_path=filename,
                line_number=traceback.tb_lineno,
                function_name=code.co_name,
            )
        traceback = traceback.tb_next

    return location
