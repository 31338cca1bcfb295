"""Entity tree of suites, tests and test runs.

Suites nest suites and tests; every entity belongs to exactly one parent
suite, and the root suite has no parent. Entities carry the execution
state (skip flag, expectation, timeout) mutated by modifiers at build
time and by the focused filter afterwards.
"""

from .environments import Environment, Hook, HookKind
from .nodes import Expectations, Suite, Test
from .runs import TestRun

__all__ = (
    'Environment',
    'Expectations',
    'Hook',
    'HookKind',
    'Suite',
    'Test',
    'TestRun',
)
