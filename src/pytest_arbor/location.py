"""Source locations of declared suites and tests."""

from inspect import currentframe
from pathlib import Path

from pydantic import Field

from pytest_arbor.models import SchemaModel

#: Frames from files under this directory belong to the library itself.
PACKAGE_ROOT = Path(__file__).resolve().parent


class Location(SchemaModel):
    """Position of a declaration in user code.

    The empty location (all defaults) is used for the root suite.
    """

    file_path: str = Field(
        default='',
        title='File path',
        description='Path of the file containing the declaration.',
    )

    line_number: int = Field(
        default=0,
        ge=0,
        title='Line number',
        description='1-based line of the declaration, `0` if unknown.',
    )

    function_name: str = Field(
        default='',
        title='Function name',
        description='Name of the function performing the declaration.',
    )

    def __str__(self) -> str:
        """Return `file:line`."""
        if not self.file_path:
            return '<unknown>'

        return f'{self.file_path}:{self.line_number}'

    @classmethod
    def caller(cls) -> 'Location':
        """Capture the first call site outside of this package.

        Returns:
            Location of the user code calling into the library, or the
            empty location if the whole stack belongs to the library.
        """
        frame = currentframe()
        try:
            while frame is not None:
                filename = frame.f_code.co_filename
                if not _is_internal(filename):
                    return cls(
                        file_path=filename,
                        line_number=frame.f_lineno,
                        function_name=frame.f_code.co_name,
                    )
                frame = frame.f_back
        finally:
            del frame

        return cls()


def _is_internal(filename: str) -> bool:
    """Tell whether a frame filename belongs to the library."""
    if filename.startswith('<'):
        return False

    return Path(filename).resolve().is_relative_to(PACKAGE_ROOT)
