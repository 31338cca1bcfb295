"""Authoring and selection core.

It provides:
- `SpecBuilder`, the immutable chainable declaration builder;
- `TestCollector` and `SuiteScope`, turning declarations into a tree;
- `FocusedFilter`, selecting tests implied by focused entities;
- `Repeater`, expanding tests into repeated runs.
"""

from .builder import BuilderSpec, SpecBuilder
from .collector import SuiteScope, TestCollector
from .focus import FocusedFilter
from .repeater import Repeater

__all__ = (
    'BuilderSpec',
    'FocusedFilter',
    'Repeater',
    'SpecBuilder',
    'SuiteScope',
    'TestCollector',
)
