"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report spec module loading failures and focus policy violations in a
structured and extensible way.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from pytest_arbor.location import Location

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_FILENAME = '<unknown source>'
FORMAT_INDENT = 4

SCALARS = (str, bytes, int, float, bool)
MAPPINGS = (dict,)
SEQUENCES = (list, tuple, set)


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source file where the error occurred.
    filename: str | None
    #: Line number in the source file (1-based).
    line_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Data describing the entities involved.
    element: Any


class ErrorFormatter:
    """Utility class for formatting arbor errors.

    Produces human-readable messages with an optional source location
    and a YAML snippet describing the involved entities.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            message += f', line {line_num}'
        message += linesep

        if (error := context.get('error')) is not None:
            message += f'{indent}caused by {error!r}{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a YAML snippet for the involved element.

        Args:
            context: Error context containing element data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string.
        """
        indent = cls._ensure_indent(indent)

        if (element := context.get('element')) is None:
            return ''

        snippet = f'{indent}{SNIPPET_ELLIPSIS}'
        snippet += cls._make_yaml(element, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively replace opaque objects with a placeholder.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                key: cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to an indented YAML string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return linesep.join(
            f'{indent}{line}'
            for line in data.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input.

        Args:
            indent: Indentation as string or number of spaces.

        Returns:
            A string consisting of spaces or the provided string.
        """
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class FocusWarning(UserWarning):
    """Warning emitted when focused entities narrow the run.

    Focus is a debugging aid; the warning keeps a forgotten `fit` or
    `fdescribe` visible in the session summary.
    """


class ArborError(Exception, ErrorFormatter):
    """Base exception for all pytest-arbor errors."""

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location and data.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)

    @classmethod
    def from_location(cls, message: str, location: 'Location', *,
                      error: Exception | None = None,
                      element: Any = None) -> 'Self':  # noqa: ANN401
        """Create an error instance pointing at a source location.

        Args:
            message: Human-readable error message.
            location: Location of the offending declaration.
            error: Optional underlying exception.
            element: Optional data describing involved entities.

        Returns:
            An initialized error with location context.
        """
        error_context = ErrorContext(
            filename=location.file_path or None,
            line_num=location.line_number or None,
            error=error,
            element=element,
        )

        return cls(message, context=error_context)


class SpecLoadError(ArborError):
    """Error raised when a spec module cannot be executed.

    Wraps import, syntax, and runtime failures raised while the module
    body and its suite bodies declare the tree.
    """


class FocusError(ArborError):
    """Error raised when focused entities are present but forbidden."""
