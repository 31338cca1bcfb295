"""Concrete execution instances of tests."""

from .nodes import Test


class TestRun:
    """A single intended execution of a test.

    Several runs may wrap the same test when it is repeated; `index`
    tells them apart.
    """

    __test__ = False

    def __init__(self, test: Test, index: int = 0) -> None:
        self._test = test
        self._index = index

    def __repr__(self) -> str:
        return f'TestRun({self._test.full_name()!r}, index={self._index})'

    def test(self) -> Test:
        return self._test

    def index(self) -> int:
        return self._index
