"""Tree construction from `describe` and `it` declarations.

The collector owns the modifier and attribute registries and the flat
accumulators of every suite and test it has created. It does not keep a
"current suite" cursor: each suite body receives a `SuiteScope` bound to
its own suite, and declarations made through that scope land in it.
"""

from typing import TYPE_CHECKING, Any

from pytest_arbor.location import Location
from pytest_arbor.settings import ArborSettings, effective_timeout
from pytest_arbor.tree import Suite, Test

from .builder import BuilderSpec, SpecBuilder

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_arbor.tree import Environment, Hook
    from pytest_arbor.tree.nodes import TestBody

    from .builder import Attribute, Modifier

#: Suite body. Receives the scope of the new suite and extra arguments.
type SuiteBody = Callable[..., Any]


class SuiteScope:
    """Declaration surface bound to one suite.

    Exposes the registration entry points (`describe`, `it` and the hook
    functions) plus any aliases registered on the collector, such as
    `fit` or `xdescribe`.
    """

    def __init__(self, collector: 'TestCollector', suite: Suite) -> None:
        self.collector = collector
        self.suite = suite

        self.describe: SpecBuilder[Suite] = SpecBuilder(
            collector.suite_modifiers,
            collector.suite_attributes,
            self._describe,
        )
        self.it: SpecBuilder[Test] = SpecBuilder(
            collector.test_modifiers,
            collector.test_attributes,
            self._it,
        )

    def __repr__(self) -> str:
        return f'SuiteScope({self.suite!r})'

    def __getattr__(self, name: str) -> Any:  # noqa: ANN401
        if name.startswith('_') or (alias := self.collector.aliases.get(name)) is None:
            raise AttributeError(f'{type(self).__name__!r} object has no attribute {name!r}')

        return alias(self)

    def _describe(self, specs: tuple[BuilderSpec, ...], name: str,
                  suite_body: SuiteBody, *suite_args: Any) -> Suite:  # noqa: ANN401
        location = Location.caller()
        suite = Suite(self.suite, name, location)
        for spec in specs:
            spec.apply(suite)

        suite_body(SuiteScope(self.collector, suite), *suite_args)
        self.collector.register_suite(suite)

        return suite

    def _it(self, specs: tuple[BuilderSpec, ...], name: str,
            test_body: 'TestBody') -> Test:
        location = Location.caller()
        test = Test(self.suite, name, test_body, location)
        test.set_timeout(self.collector.timeout)
        for spec in specs:
            spec.apply(test)

        self.collector.register_test(test)

        return test

    def before_all(self, callback: 'Hook') -> 'Hook':
        return self.suite.environment().before_all(callback)

    def before_each(self, callback: 'Hook') -> 'Hook':
        return self.suite.environment().before_each(callback)

    def after_all(self, callback: 'Hook') -> 'Hook':
        return self.suite.environment().after_all(callback)

    def after_each(self, callback: 'Hook') -> 'Hook':
        return self.suite.environment().after_each(callback)

    def use_environment(self, environment: 'Environment') -> Suite:
        """Attach an external environment to the scope suite."""
        return self.suite.add_environment(environment)

    def namespace(self) -> dict[str, Any]:
        """Return the scope entry points by name, aliases included."""
        names = {
            'describe': self.describe,
            'it': self.it,
            'before_all': self.before_all,
            'before_each': self.before_each,
            'after_all': self.after_all,
            'after_each': self.after_each,
            'use_environment': self.use_environment,
        }
        for name in self.collector.aliases:
            names[name] = getattr(self, name)

        return names


class TestCollector:
    """Mutable context turning declarations into tree entities.

    Modifier and attribute registries are read when a declaration is
    built, so registering a name only affects later declarations.
    """

    __test__ = False

    def __init__(self, timeout: int | None = None,
                 settings: ArborSettings | None = None) -> None:
        """Initialize a collector.

        Args:
            timeout: Default test timeout in milliseconds; `0` means no
                timeout. Falls back to `settings.timeout`.
            settings: Runtime settings; resolved from the environment
                when omitted.
        """
        if settings is None:
            settings = ArborSettings()
        if timeout is None:
            timeout = settings.timeout

        self.timeout = effective_timeout(timeout)

        self.suite_modifiers: dict[str, Modifier] = {}
        self.suite_attributes: dict[str, Attribute] = {}
        self.test_modifiers: dict[str, Modifier] = {}
        self.test_attributes: dict[str, Attribute] = {}
        self.aliases: dict[str, Callable[[SuiteScope], Any]] = {}

        self._suites: list[Suite] = []
        self._tests: list[Test] = []

        self.root = Suite(None, '', Location())
        self._api = SuiteScope(self, self.root)

    def api(self) -> SuiteScope:
        """Return the declaration scope of the root suite."""
        return self._api

    def use_environment(self, environment: 'Environment') -> Suite:
        """Attach an external environment to the root suite."""
        return self._api.use_environment(environment)

    def add_test_modifier(self, name: str, callback: 'Modifier') -> None:
        self.test_modifiers[name] = callback

    def add_test_attribute(self, name: str, callback: 'Attribute') -> None:
        self.test_attributes[name] = callback

    def add_suite_modifier(self, name: str, callback: 'Modifier') -> None:
        self.suite_modifiers[name] = callback

    def add_suite_attribute(self, name: str, callback: 'Attribute') -> None:
        self.suite_attributes[name] = callback

    def add_alias(self, name: str, factory: 'Callable[[SuiteScope], Any]') -> None:
        """Expose a derived entry point on every scope.

        Args:
            name: Alias name, for example `fit`.
            factory: Function building the alias value from a scope,
                for example `lambda scope: scope.it.focus`.
        """
        self.aliases[name] = factory

    def register_suite(self, suite: Suite) -> None:
        self._suites.append(suite)

    def register_test(self, test: Test) -> None:
        self._tests.append(test)

    def tests(self) -> list[Test]:
        """Return every test created so far, in declaration order."""
        return self._tests

    def suites(self) -> list[Suite]:
        """Return every suite created so far, in completion order."""
        return self._suites
