"""Tests for tree construction."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pytest_arbor.core import TestCollector
from pytest_arbor.settings import UNBOUNDED_TIMEOUT, ArborSettings
from pytest_arbor.tree import Environment, Suite, Test
from tests.conftest import noop

if TYPE_CHECKING:
    from pytest_arbor.core import SuiteScope


def test_nested_describe_parents(collector: TestCollector) -> None:
    """Nested suites link to the enclosing suite at every depth."""
    api = collector.api()
    found: dict[str, Suite] = {}

    def level(scope: 'SuiteScope', depth: int) -> None:
        found[scope.suite.name()] = scope.suite
        if depth < 4:
            scope.describe(f'level{depth + 1}', level, depth + 1)
        else:
            scope.it('leaf', noop)

    api.describe('level1', level, 1)

    assert found['level1'].parent_suite() is collector.root
    for depth in range(2, 5):
        assert found[f'level{depth}'].parent_suite() is found[f'level{depth - 1}']

    (leaf,) = collector.tests()
    assert leaf.suite() is found['level4']
    assert leaf.full_name() == 'level1 level2 level3 level4 leaf'


def test_accumulators_order(collector: TestCollector) -> None:
    """Tests are listed in declaration order, suites once their body ends."""
    api = collector.api()

    def outer(scope: 'SuiteScope') -> None:
        scope.it('first', noop)
        scope.describe('inner', lambda inner: inner.it('second', noop))
        scope.it('third', noop)

    api.describe('outer', outer)
    api.it('fourth', noop)

    assert [test.name() for test in collector.tests()] == ['first', 'second', 'third', 'fourth']
    assert [suite.name() for suite in collector.suites()] == ['inner', 'outer']


def test_suite_body_arguments(collector: TestCollector) -> None:
    """Extra `describe` arguments are forwarded to the suite body."""
    received = []

    collector.api().describe('suite', lambda scope, *args: received.extend(args), 1, 'two')

    assert received == [1, 'two']


def test_test_body_is_deferred(collector: TestCollector) -> None:
    """Declaring a test does not execute its body."""
    def body(state: dict) -> None:
        raise AssertionError('must not run')

    test = collector.api().it('deferred', body)

    assert test.body() is body


def test_modifiers_applied_in_order(collector: TestCollector) -> None:
    """Entries are applied to the created entity in chaining order."""
    applied: list[tuple[str, object]] = []
    collector.add_test_modifier('tag', lambda test, value: applied.append(('test', value)))
    collector.add_suite_modifier('tag', lambda suite, value: applied.append(('suite', value)))
    collector.add_suite_attribute('mark', lambda suite: applied.append(('suite', 'mark')))

    api = collector.api()
    api.describe.tag(1).mark.tag(2)('suite', lambda scope: scope.it.tag(3).tag(4)('test', noop))

    assert applied == [('suite', 1), ('suite', 'mark'), ('suite', 2), ('test', 3), ('test', 4)]


def test_modifiers_see_entity_before_body(collector: TestCollector) -> None:
    """Suite modifiers run before the suite body."""
    order = []
    collector.add_suite_attribute('mark', lambda suite: order.append('modifier'))

    collector.api().describe.mark('suite', lambda scope: order.append('body'))

    assert order == ['modifier', 'body']


def test_late_registration_only_affects_later(collector: TestCollector) -> None:
    """Registering a name mid-construction only changes later declarations."""
    api = collector.api()
    first = api.it('first', noop)

    collector.add_test_attribute('skipped', lambda test: test.set_skipped(True))
    second = api.it.skipped('second', noop)

    assert not first.skipped()
    assert second.skipped()


def test_unknown_modifier(collector: TestCollector) -> None:
    """Unregistered names raise attribute errors."""
    with pytest.raises(AttributeError):
        collector.api().it.missing('test', noop)


@pytest.mark.parametrize('timeout, expected', (
    pytest.param(None, 10_000, id='settings'),
    pytest.param(500, 500, id='explicit'),
    pytest.param(0, UNBOUNDED_TIMEOUT, id='unbounded'),
))
def test_default_timeout(settings: ArborSettings, timeout: int | None, expected: int) -> None:
    """Tests get the collector default timeout."""
    collector = TestCollector(timeout, settings=settings)

    test = collector.api().it('test', noop)

    assert test.timeout() == expected


def test_settings_zero_timeout() -> None:
    """A zero timeout from settings is unbounded too."""
    collector = TestCollector(settings=ArborSettings(timeout=0))

    assert collector.timeout == UNBOUNDED_TIMEOUT


def test_hooks_registration(collector: TestCollector) -> None:
    """Hooks are forwarded to the scope suite environment."""
    api = collector.api()
    hooks = {}

    def body(scope: 'SuiteScope') -> None:
        hooks['before_all'] = scope.before_all(lambda state: None)
        hooks['before_each'] = scope.before_each(lambda state, test: None)
        hooks['after_all'] = scope.after_all(lambda state: None)
        hooks['after_each'] = scope.after_each(lambda state, test: None)

    suite = api.describe('suite', body)

    for kind, hook in hooks.items():
        assert suite.environment().hooks(kind) == (hook,)
    assert collector.root.environment().hooks('before_all') == ()


def test_use_environment(collector: TestCollector) -> None:
    """Environments attach to the scope suite and return its result."""
    shared = Environment('shared')
    results = {}

    def body(scope: 'SuiteScope') -> None:
        results['suite'] = scope.use_environment(shared)

    suite = collector.api().describe('suite', body)

    assert results['suite'] is suite
    assert suite.environments() == (suite.environment(), shared)
    assert collector.use_environment(shared) is collector.root


def test_aliases(collector: TestCollector) -> None:
    """Aliases are built from the scope they are accessed on."""
    collector.add_alias('named_it', lambda scope: scope.it)
    api = collector.api()

    test = api.named_it('aliased', noop)

    assert isinstance(test, Test)
    assert 'named_it' in api.namespace()
    with pytest.raises(AttributeError):
        api.missing_alias  # noqa: B018


def test_namespace(collector: TestCollector) -> None:
    """The namespace exposes every registration entry point."""
    assert set(collector.api().namespace()) == {
        'describe',
        'it',
        'before_all',
        'before_each',
        'after_all',
        'after_each',
        'use_environment',
    }


def test_independent_collectors(settings: ArborSettings) -> None:
    """Collectors do not share registries or accumulators."""
    first = TestCollector(settings=settings)
    second = TestCollector(settings=settings)
    first.add_test_attribute('mark', lambda test: None)

    first.api().it.mark('test', noop)

    assert len(first.tests()) == 1
    assert second.tests() == []
    with pytest.raises(AttributeError):
        second.api().it.mark  # noqa: B018


def test_declaration_location(collector: TestCollector) -> None:
    """Entities record the line of their declaration."""
    test = collector.api().it('located', noop)

    assert Path(test.location().file_path).name == Path(__file__).name
    assert test.location().line_number > 0
    assert test.location().function_name == 'test_declaration_location'
