"""Tests for runtime settings."""

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from pytest_arbor.settings import DEFAULT_TIMEOUT, UNBOUNDED_TIMEOUT, ArborSettings, effective_timeout

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


def test_defaults(mocker: 'MockerFixture') -> None:
    """Defaults apply without environment variables."""
    mocker.patch.dict('os.environ', {}, clear=True)

    settings = ArborSettings()

    assert settings.timeout == DEFAULT_TIMEOUT
    assert settings.forbid_focus is False


def test_environment(mocker: 'MockerFixture') -> None:
    """Settings are read from `ARBOR_*` variables."""
    mocker.patch.dict('os.environ', {
        'ARBOR_TIMEOUT': '250',
        'ARBOR_FORBID_FOCUS': 'true',
        'UNRELATED': 'ignored',
    }, clear=True)

    settings = ArborSettings()

    assert settings.timeout == 250
    assert settings.forbid_focus is True


def test_negative_timeout() -> None:
    """Negative timeouts are rejected."""
    with pytest.raises(ValidationError):
        ArborSettings(timeout=-1)


def test_merge() -> None:
    """Merging applies only provided overrides."""
    settings = ArborSettings(timeout=100, forbid_focus=False)

    assert settings.merge() is settings
    assert settings.merge(timeout=None, forbid_focus=None) is settings

    merged = settings.merge(timeout=0, forbid_focus=True)
    assert merged.timeout == 0
    assert merged.forbid_focus is True
    assert settings.timeout == 100


@pytest.mark.parametrize('timeout, expected', (
    pytest.param(0, UNBOUNDED_TIMEOUT, id='unbounded'),
    pytest.param(1, 1, id='short'),
    pytest.param(DEFAULT_TIMEOUT, DEFAULT_TIMEOUT, id='default'),
))
def test_effective_timeout(timeout: int, expected: int) -> None:
    """Zero maps to a very large finite timeout."""
    assert effective_timeout(timeout) == expected
