"""Pytest plugin collecting and executing arbor spec modules.

This module integrates `pytest-arbor` with pytest by:
- registering command-line and ini options;
- configuring a shared `Runtime` for the session;
- collecting `spec_*.py` modules as trees of tests;
- deselecting tests left out by focused suites and tests;
- running suite-level teardown hooks between items.
"""

from fnmatch import fnmatch
from typing import TYPE_CHECKING

import pytest

from pytest_arbor.errors import FocusError
from pytest_arbor.runtime import Runtime
from pytest_arbor.settings import ArborSettings

from .item import SpecItem, SpecSession
from .spec import SpecFile

if TYPE_CHECKING:
    from pathlib import Path

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.config.argparsing import Parser
    from _pytest.main import Session
    from _pytest.nodes import Item, Node


def pytest_addoption(parser: 'Parser') -> None:
    """Register pytest command-line and ini options for pytest-arbor.

    Args:
        parser: Pytest argument parser.
    """
    parser.addoption(
        '--arbor-forbid-focus',
        action='store_true',
        dest='arbor_forbid_focus',
        default=None,
        help=(
            'Fail the session when some suites or tests are focused '
            'instead of running only the focused ones.'
        ),
    )
    parser.addoption(
        '--arbor-timeout',
        action='store',
        dest='arbor_timeout',
        type=int,
        default=None,
        help='Default test timeout in milliseconds; 0 disables timeouts.',
    )
    parser.addini(
        'arbor_files',
        type='args',
        default=['spec_*.py'],
        help='Glob-style file patterns of arbor spec modules.',
    )


def pytest_configure(config: 'Config') -> None:
    """Configure pytest-arbor integration.

    Attaches a shared `Runtime` as `config.arbor_runtime` and the
    execution state as `config.arbor_session`.

    Args:
        config: Pytest configuration object.
    """
    settings = ArborSettings().merge(
        timeout=config.getoption('arbor_timeout', default=None),
        forbid_focus=config.getoption('arbor_forbid_focus', default=None),
    )

    config.arbor_runtime = Runtime(settings)  # type: ignore[attr-defined]
    config.arbor_session = SpecSession()  # type: ignore[attr-defined]


def pytest_collect_file(parent: 'Node', file_path: 'Path') -> SpecFile | None:
    """Collect arbor spec modules.

    Args:
        parent: Parent pytest collection node.
        file_path: Path to the file being considered.

    Returns:
        A `SpecFile` collector if the file matches `arbor_files`, otherwise `None`.
    """
    if file_path.suffix != '.py':
        return None

    patterns = parent.config.getini('arbor_files')
    if any(fnmatch(file_path.name, pattern) for pattern in patterns):
        return SpecFile.from_parent(
            parent,
            path=file_path,
        )

    return None


def pytest_collection_modifyitems(session: 'Session', config: 'Config',
                                  items: list['Item']) -> None:
    """Deselect spec items not selected by focused suites and tests.

    Focus is session-wide: a focused test in one module narrows the
    spec items of every module.

    Args:
        session: Pytest session.
        config: Pytest configuration object.
        items: Collected items, modified in place.

    Raises:
        pytest.UsageError: If entities are focused and focus is forbidden.
    """
    tests = list(dict.fromkeys(
        item.test
        for item in items
        if isinstance(item, SpecItem)
    ))
    if not tests:
        return

    runtime: Runtime = config.arbor_runtime  # type: ignore[attr-defined]
    try:
        selected = set(runtime.select(tests))
    except FocusError as error:
        raise pytest.UsageError(str(error)) from error

    remaining, deselected = [], []
    for item in items:
        if isinstance(item, SpecItem) and item.test not in selected:
            deselected.append(item)
        else:
            remaining.append(item)

    if deselected:
        config.hook.pytest_deselected(items=deselected)
        items[:] = remaining


@pytest.hookimpl(trylast=True)
def pytest_runtest_teardown(item: 'Item', nextitem: 'Item | None') -> None:
    """Run `after_each` hooks and leave suites the next item is not in.

    Args:
        item: Item being torn down.
        nextitem: Item scheduled next, `None` at the end of the session.
    """
    if isinstance(item, SpecItem):
        item.finish(nextitem if isinstance(nextitem, SpecItem) else None)
