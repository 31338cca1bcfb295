"""Pytest collector for arbor spec modules.

Each collected module is executed against the session runtime; the
tests it declares are expanded into runs and wrapped into `SpecItem`
instances. Repeated runs of a test get an index suffix.
"""

from typing import TYPE_CHECKING

import pytest

from pytest_arbor.errors import SpecLoadError

from .item import SpecItem

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from pytest_arbor.runtime import Runtime


class SpecFile(pytest.File):
    """Pytest file collector for spec modules."""

    def collect(self) -> 'Iterable[SpecItem]':
        """Collect one pytest item per test run.

        Returns:
            Iterable of `SpecItem` instances in declaration order.

        Raises:
            CollectError: If the module fails to declare its tree.
        """
        runtime: Runtime = self.config.arbor_runtime  # type: ignore[attr-defined]

        try:
            tests = runtime.load(self.path)
        except SpecLoadError as error:
            raise self.CollectError(str(error)) from error

        for test in tests:
            total = runtime.repeater.total(test)
            for run in runtime.repeater.create_test_runs((test,)):
                name = test.full_name() or '<anonymous>'
                if total > 1:
                    name = f'{name}[{run.index()}]'
                yield SpecItem.from_parent(
                    self,
                    name=name,
                    run=run,
                    spec_session=self.config.arbor_session,  # type: ignore[attr-defined]
                )
