"""Runtime execution of arbor test runs under pytest.

This module defines the pytest item executing a single test run and
the session state tracking which suites have been entered, so that
`before_all` and `after_all` hooks run once per contiguous block of
tests of a suite.
"""

from typing import TYPE_CHECKING, Any

import pytest

from pytest_arbor.tree import Expectations

if TYPE_CHECKING:
    from collections.abc import Sequence

if TYPE_CHECKING:
    from pytest_arbor.tree import HookKind, Suite, Test, TestRun


class SpecSession:
    """Execution state shared by all spec items of a pytest session.

    Attributes:
        state: Mutable mapping passed to every hook and test body.
    """

    def __init__(self) -> None:
        self.state: dict[str, Any] = {}
        self._active: list[Suite] = []

    def active_suites(self) -> tuple['Suite', ...]:
        """Return entered suites, outermost first."""
        return tuple(self._active)

    def enter(self, chain: 'Sequence[Suite]') -> None:
        """Enter suites of a chain, running their `before_all` hooks.

        Args:
            chain: Suites from the root down to the test suite.
        """
        self.leave(chain)
        for suite in chain:
            if suite in self._active:
                continue
            self._active.append(suite)
            self.run_hooks(suite, 'before_all')

    def leave(self, keep: 'Sequence[Suite]' = ()) -> None:
        """Leave entered suites not in `keep`, innermost first.

        Args:
            keep: Suites that stay entered.
        """
        while self._active and self._active[-1] not in keep:
            suite = self._active.pop()
            self.run_hooks(suite, 'after_all', reverse=True)

    def run_hooks(self, suite: 'Suite', kind: 'HookKind', *args: Any,  # noqa: ANN401
                  reverse: bool = False) -> None:
        """Run hooks of a kind from every environment of a suite.

        Args:
            suite: Suite owning the environments.
            kind: Hook kind.
            *args: Extra hook arguments after the state.
            reverse: Run environments in reverse attachment order.
        """
        environments = suite.environments()
        if reverse:
            environments = environments[::-1]

        for environment in environments:
            for hook in environment.hooks(kind):
                hook(self.state, *args)


def suite_chain(test: 'Test') -> list['Suite']:
    """Return the suites enclosing a test, outermost first."""
    chain = list(test.ancestors())
    chain.reverse()

    return chain


class SpecItem(pytest.Item):
    """Pytest item executing a single test run.

    A test is skipped when it or any enclosing suite is skipped, and is
    expected to fail when it or any enclosing suite expects failure.
    """

    def __init__(self, *,
                 run: 'TestRun',
                 spec_session: SpecSession,
                 **kwargs: Any) -> None:  # noqa: ANN401
        """Initialize a pytest item backed by a test run.

        Args:
            run: Test run to execute.
            spec_session: Shared execution state.
            **kwargs: Keyword pytest.Item arguments.
        """
        super().__init__(**kwargs)

        self.run = run
        self.test = run.test()
        self.spec_session = spec_session
        self.timeout = self.test.timeout()
        self.user_properties.append(('timeout', self.timeout))

        self._entered = False

    def skip_reason(self) -> str | None:
        """Return why the test is skipped, `None` if it is not."""
        if self.test.skipped():
            return 'test is skipped'

        for suite in self.test.ancestors():
            if suite.skipped():
                return f'suite {suite.full_name()!r} is skipped'

        return None

    def expects_failure(self) -> bool:
        if self.test.expectation() == Expectations.FAIL:
            return True

        return any(
            suite.expectation() == Expectations.FAIL
            for suite in self.test.ancestors()
        )

    def setup(self) -> None:
        """Enter enclosing suites and run `before_each` hooks."""
        if reason := self.skip_reason():
            pytest.skip(reason)

        chain = suite_chain(self.test)
        self.spec_session.enter(chain)

        self._entered = True
        for suite in chain:
            self.spec_session.run_hooks(suite, 'before_each', self.test)

    def runtest(self) -> None:
        """Execute the test body."""
        body = self.test.body()

        if not self.expects_failure():
            body(self.spec_session.state)
            return

        try:
            body(self.spec_session.state)
        except Exception as error:  # noqa: BLE001
            pytest.xfail(f'failed as expected: {error!r}')

        pytest.fail('Test is expected to fail, but passed', pytrace=False)

    def finish(self, nextitem: 'SpecItem | None') -> None:
        """Run `after_each` hooks and leave suites not used by `nextitem`.

        Args:
            nextitem: Spec item scheduled next, if any.
        """
        if self._entered:
            self._entered = False
            for suite in self.test.ancestors():
                self.spec_session.run_hooks(suite, 'after_each', self.test, reverse=True)

        keep = suite_chain(nextitem.test) if nextitem is not None else ()
        self.spec_session.leave(keep)

    def reportinfo(self) -> tuple[Any, int | None, str]:
        """Point reports at the `it` declaration."""
        location = self.test.location()
        if not location.line_number:
            return self.path, None, self.name

        return self.path, location.line_number - 1, self.name
