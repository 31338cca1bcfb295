"""Tests configurations and fixtures."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pytest_arbor.builtins import install
from pytest_arbor.core import FocusedFilter, Repeater, TestCollector
from pytest_arbor.runtime import Runtime
from pytest_arbor.settings import ArborSettings

if TYPE_CHECKING:
    from pytest_arbor.core import SuiteScope

pytest_plugins = ('pytester',)

EXAMPLES = Path(__file__).parent / 'examples'


def noop(*args: object) -> None:  # noqa: ARG001
    """Body doing nothing, usable for tests, suites, and hooks."""
    return None


@pytest.fixture
def examples() -> Path:
    """Directory of example spec modules."""
    return EXAMPLES


@pytest.fixture
def settings() -> ArborSettings:
    """Settings independent of the `ARBOR_*` environment."""
    return ArborSettings(timeout=10_000, forbid_focus=False)


@pytest.fixture
def collector(settings: ArborSettings) -> TestCollector:
    """A bare collector without any registered vocabulary."""
    return TestCollector(settings=settings)


@pytest.fixture
def focused_filter() -> FocusedFilter:
    return FocusedFilter()


@pytest.fixture
def repeater() -> Repeater:
    return Repeater()


@pytest.fixture
def stocked(collector: TestCollector, focused_filter: FocusedFilter,
            repeater: Repeater) -> TestCollector:
    """A collector with the built-in vocabulary installed."""
    install(collector, focused_filter, repeater)
    return collector


@pytest.fixture
def api(stocked: TestCollector) -> 'SuiteScope':
    """Root declaration scope of the stocked collector."""
    return stocked.api()


@pytest.fixture
def runtime(settings: ArborSettings) -> Runtime:
    return Runtime(settings)
