"""Chainable builders for suite and test declarations.

A builder accumulates modifier and attribute entries and commits them
only when it is finally called. Builders are immutable: chaining always
produces a new builder, so a base builder such as `it` can be shared by
every declaration in a spec module.

Names are resolved against registries mapping a name to a callback.
The registries are held by reference, so a name registered after a
builder was created is visible to it, and the last registration of a
name wins.
"""

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import Field

from pytest_arbor.models import SchemaModel

#: Modifier callback: mutates an entity with the supplied arguments.
type Modifier = Callable[..., None]

#: Attribute callback: mutates an entity without arguments.
type Attribute = Callable[[Any], None]

#: Terminal callback committing an entity.
type SpecCallback[T] = Callable[..., T]


class BuilderSpec(SchemaModel):
    """A single accumulated builder entry."""

    name: str = Field(
        default='',
        title='Entry name',
        description='Registered modifier or attribute name.',
    )

    callback: Callable[..., Any] = Field(
        title='Entity callback',
        description='Modifier or attribute applied to the created entity.',
    )

    args: tuple[Any, ...] = Field(
        default=(),
        title='Callback arguments',
        description='Arguments passed after the entity; empty for attributes.',
    )

    def apply(self, entity: Any) -> None:  # noqa: ANN401
        """Apply the entry to an entity."""
        self.callback(entity, *self.args)


class SpecBuilder[T]:
    """Immutable, chainable declaration builder.

    Calling the builder runs the terminal callback with the accumulated
    entries followed by the call arguments. Accessing a registered
    modifier name returns a function producing a new builder with that
    entry appended; accessing a registered attribute name returns the
    new builder directly.
    """

    __slots__ = ('_attributes', '_callback', '_modifiers', '_specs')

    def __init__(self, modifiers: Mapping[str, Modifier],
                 attributes: Mapping[str, Attribute],
                 callback: SpecCallback[T],
                 specs: tuple[BuilderSpec, ...] = ()) -> None:
        """Initialize a builder.

        Args:
            modifiers: Live registry of modifier callbacks by name.
            attributes: Live registry of attribute callbacks by name.
            callback: Terminal callback receiving the accumulated entries
                and the terminal call arguments.
            specs: Entries accumulated so far.
        """
        self._modifiers = modifiers
        self._attributes = attributes
        self._callback = callback
        self._specs = specs

    def __call__(self, *args: Any, **kwargs: Any) -> T:  # noqa: ANN401
        return self._callback(self._specs, *args, **kwargs)

    def __getattr__(self, name: str) -> Any:  # noqa: ANN401
        if name.startswith('_'):
            raise AttributeError(name)

        return self.resolve(name)

    def __repr__(self) -> str:
        names = ', '.join(spec.name for spec in self._specs)
        return f'{type(self).__name__}([{names}])'

    @property
    def specs(self) -> tuple[BuilderSpec, ...]:
        """Entries accumulated by this builder."""
        return self._specs

    def resolve(self, name: str) -> 'Callable[..., SpecBuilder[T]] | SpecBuilder[T]':
        """Look up a modifier or an attribute by name.

        Modifiers take precedence over attributes registered under the
        same name.

        Args:
            name: Registered modifier or attribute name.

        Returns:
            For a modifier, a function that takes the modifier arguments
            and returns the chained builder. For an attribute, the
            chained builder.

        Raises:
            AttributeError: If the name is not registered.
        """
        if (modifier := self._modifiers.get(name)) is not None:
            return lambda *args: self.chain(modifier, *args, name=name)

        if (attribute := self._attributes.get(name)) is not None:
            return self.chain(attribute, name=name)

        raise AttributeError(f'{type(self).__name__!r} has no modifier or attribute {name!r}')

    def chain(self, callback: Modifier, *args: Any,  # noqa: ANN401
              name: str = '') -> 'SpecBuilder[T]':
        """Return a new builder with one more entry appended.

        Args:
            callback: Modifier or attribute callback.
            *args: Modifier arguments.
            name: Registered name of the callback, for diagnostics.

        Returns:
            New builder; this one is left untouched.
        """
        return SpecBuilder(
            self._modifiers,
            self._attributes,
            self._callback,
            (*self._specs, BuilderSpec(name=name, callback=callback, args=args)),
        )
