"""Stock declaration vocabulary.

Registers on a collector:
- `skip(condition)` and `fail(condition)` modifiers for suites and tests;
- `repeat(count)` modifier for suites and tests;
- `focus` attribute for suites and tests;
- `slow` attribute for tests, tripling their timeout;
- `fit`, `xit`, `fdescribe` and `xdescribe` scope aliases.
"""

from functools import partial
from typing import TYPE_CHECKING

from pytest_arbor.tree import Expectations

if TYPE_CHECKING:
    from pytest_arbor.core import FocusedFilter, Repeater, SuiteScope, TestCollector
    from pytest_arbor.tree import Suite, Test

#: Timeout multiplier applied by the `slow` attribute.
SLOW_FACTOR = 3


def skip(entity: 'Test | Suite', condition: object = True) -> None:
    """Mark an entity skipped when the condition holds."""
    if condition:
        entity.set_skipped(True)


def fail(entity: 'Test | Suite', condition: object = True) -> None:
    """Expect an entity to fail when the condition holds."""
    if condition:
        entity.set_expectation(Expectations.FAIL)


def slow(test: 'Test') -> None:
    """Triple the timeout of a test."""
    test.set_timeout(test.timeout() * SLOW_FACTOR)


def focus(focused_filter: 'FocusedFilter', entity: 'Test | Suite') -> None:
    focused_filter.mark_focused(entity)


def repeat(repeater: 'Repeater', entity: 'Test | Suite', count: int) -> None:
    repeater.repeat(entity, count)


def install(collector: 'TestCollector',
            focused_filter: 'FocusedFilter',
            repeater: 'Repeater') -> None:
    """Register the stock vocabulary on a collector.

    Args:
        collector: Collector to extend.
        focused_filter: Filter receiving entities marked with `focus`.
        repeater: Repeater receiving `repeat` counts.
    """
    focus_ = partial(focus, focused_filter)
    repeat_ = partial(repeat, repeater)

    collector.add_test_modifier('skip', skip)
    collector.add_test_modifier('fail', fail)
    collector.add_test_modifier('repeat', repeat_)
    collector.add_test_attribute('slow', slow)
    collector.add_test_attribute('focus', focus_)

    collector.add_suite_modifier('skip', skip)
    collector.add_suite_modifier('fail', fail)
    collector.add_suite_modifier('repeat', repeat_)
    collector.add_suite_attribute('focus', focus_)

    collector.add_alias('fit', _focused_it)
    collector.add_alias('xit', _skipped_it)
    collector.add_alias('fdescribe', _focused_describe)
    collector.add_alias('xdescribe', _skipped_describe)


def _focused_it(scope: 'SuiteScope') -> object:
    return scope.it.focus


def _skipped_it(scope: 'SuiteScope') -> object:
    return scope.it.skip(True)


def _focused_describe(scope: 'SuiteScope') -> object:
    return scope.describe.focus


def _skipped_describe(scope: 'SuiteScope') -> object:
    return scope.describe.skip(True)
