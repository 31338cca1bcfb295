"""Suites and tests.

Both entity kinds share the mutable execution state (skip flag and
expectation) and a link to their parent suite. The tree shape is fixed
once the owning collector finishes running suite bodies.
"""

from collections.abc import Callable, Iterator
from enum import StrEnum
from typing import Any

from pytest_arbor.location import Location
from pytest_arbor.settings import DEFAULT_TIMEOUT

from .environments import Environment

#: Test body. Receives the shared run state.
type TestBody = Callable[..., Any]


class Expectations(StrEnum):
    """Expected outcome classification of a test or suite."""

    OK = 'ok'
    FAIL = 'fail'


class _Node:
    """Common state of tree entities."""

    Expectations = Expectations

    def __init__(self, name: str, location: Location) -> None:
        self._name = name
        self._location = location
        self._skipped = False
        self._expectation = Expectations.OK

    def name(self) -> str:
        return self._name

    def location(self) -> Location:
        return self._location

    def skipped(self) -> bool:
        return self._skipped

    def set_skipped(self, skipped: bool) -> None:
        self._skipped = skipped

    def expectation(self) -> Expectations:
        return self._expectation

    def set_expectation(self, expectation: Expectations) -> None:
        self._expectation = Expectations(expectation)

    def parent(self) -> 'Suite | None':
        raise NotImplementedError

    def ancestors(self) -> Iterator['Suite']:
        """Iterate over enclosing suites from the closest up to the root."""
        suite = self.parent()
        while suite is not None:
            yield suite
            suite = suite.parent_suite()

    def full_name(self) -> str:
        """Return names from the outermost named suite down to this entity."""
        names = [
            suite.name()
            for suite in self.ancestors()
            if suite.name()
        ]
        names.reverse()
        if self._name:
            names.append(self._name)

        return ' '.join(names)


class Suite(_Node):
    """Container node of the tree owning child suites, tests and hooks."""

    def __init__(self, parent: 'Suite | None', name: str,
                 location: Location | None = None) -> None:
        super().__init__(name, location or Location())
        self._parent = parent
        self._environment = Environment(f'{name} hooks' if name else 'root hooks')
        self._environments = [self._environment]

    def __repr__(self) -> str:
        return f'Suite({self.full_name()!r})'

    def parent(self) -> 'Suite | None':
        return self._parent

    def parent_suite(self) -> 'Suite | None':
        return self._parent

    def environment(self) -> Environment:
        """Return the environment collecting hooks declared in the suite body."""
        return self._environment

    def add_environment(self, environment: Environment) -> 'Suite':
        """Attach an extra hook environment to the suite.

        Args:
            environment: Environment to run along with the suite own hooks.

        Returns:
            The suite itself.
        """
        self._environments.append(environment)
        return self

    def environments(self) -> tuple[Environment, ...]:
        """Return the own environment followed by the attached ones."""
        return tuple(self._environments)


class Test(_Node):
    """Leaf node of the tree: a deferred body with a timeout."""

    __test__ = False

    def __init__(self, suite: Suite, name: str, body: TestBody,
                 location: Location | None = None) -> None:
        super().__init__(name, location or Location())
        self._suite = suite
        self._body = body
        self._timeout = DEFAULT_TIMEOUT

    def __repr__(self) -> str:
        return f'Test({self.full_name()!r})'

    def parent(self) -> Suite:
        return self._suite

    def suite(self) -> Suite:
        return self._suite

    def body(self) -> TestBody:
        return self._body

    def timeout(self) -> int:
        """Return the timeout in milliseconds."""
        return self._timeout

    def set_timeout(self, timeout: int) -> None:
        self._timeout = timeout
