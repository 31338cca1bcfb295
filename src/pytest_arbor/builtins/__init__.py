"""Built-in modifiers, attributes and aliases."""

from .modifiers import install

__all__ = (
    'install',
)
