"""Hook environments attached to suites."""

from collections.abc import Callable
from typing import Any, Literal

#: Hook callback. Receives the shared run state (and the test for
#: per-test hooks).
type Hook = Callable[..., Any]

type HookKind = Literal['before_all', 'before_each', 'after_all', 'after_each']

HOOK_KINDS: tuple[HookKind, ...] = ('before_all', 'before_each', 'after_all', 'after_each')


class Environment:
    """Named bundle of setup and teardown hooks.

    Every suite owns one environment for hooks declared in its body;
    extra environments (fixtures shared between suites) may be attached
    with `Suite.add_environment`.
    """

    def __init__(self, name: str = '') -> None:
        self.name = name
        self._hooks: dict[HookKind, list[Hook]] = {kind: [] for kind in HOOK_KINDS}

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.name!r})'

    def before_all(self, callback: Hook) -> Hook:
        """Register a hook run once before the first test of the suite."""
        return self._add('before_all', callback)

    def before_each(self, callback: Hook) -> Hook:
        """Register a hook run before every test of the suite."""
        return self._add('before_each', callback)

    def after_all(self, callback: Hook) -> Hook:
        """Register a hook run once after the last test of the suite."""
        return self._add('after_all', callback)

    def after_each(self, callback: Hook) -> Hook:
        """Register a hook run after every test of the suite."""
        return self._add('after_each', callback)

    def hooks(self, kind: HookKind) -> tuple[Hook, ...]:
        """Return registered hooks of a kind in registration order."""
        return tuple(self._hooks[kind])

    def _add(self, kind: HookKind, callback: Hook) -> Hook:
        self._hooks[kind].append(callback)
        return callback
