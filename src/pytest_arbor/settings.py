"""Runtime configuration.

Settings are resolved from `ARBOR_*` environment variables and may be
overridden explicitly by the pytest plugin or the CLI.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from pytest_arbor.models import SettingsModel

#: Default per-test timeout in milliseconds.
DEFAULT_TIMEOUT = 10 * 1000

#: Timeout used in place of the `0` ("no timeout") sentinel.
UNBOUNDED_TIMEOUT = 100_000_000


def effective_timeout(timeout: int) -> int:
    """Map the `0` sentinel to a very large finite timeout.

    Args:
        timeout: Timeout in milliseconds.

    Returns:
        The timeout to assign to tests.
    """
    if timeout == 0:
        return UNBOUNDED_TIMEOUT

    return timeout


class ArborSettings(SettingsModel):
    """Settings shared by collectors, the pytest plugin and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix='ARBOR_',
        frozen=True,
        extra='ignore',
    )

    timeout: int = Field(
        default=DEFAULT_TIMEOUT,
        ge=0,
        title='Default test timeout',
        description=(
            'Timeout in milliseconds assigned to every declared test. '
            'Zero disables the timeout.'
        ),
    )

    forbid_focus: bool = Field(
        default=False,
        title='Forbid focused entities',
        description=(
            'Fail instead of narrowing the run when some suites or tests '
            'are focused. Useful on CI to catch a forgotten `fit`.'
        ),
    )

    def merge(self, **overrides: object) -> 'ArborSettings':
        """Return a copy with non-`None` overrides applied.

        Args:
            **overrides: Field values, `None` meaning "keep current".

        Returns:
            New settings instance.
        """
        values = {
            key: value
            for key, value in overrides.items()
            if value is not None
        }
        if not values:
            return self

        return self.model_validate({**self.model_dump(), **values})
