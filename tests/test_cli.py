"""Tests for the command-line interface."""

import json
from typing import TYPE_CHECKING

import pytest
import yaml
from click.testing import CliRunner

from pytest_arbor.__main__ import cli
from pytest_arbor.errors import FocusWarning

if TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


def test_plan_yaml(examples: 'Path', mocker: 'MockerFixture') -> None:
    """The plan is printed as YAML by default."""
    mocker.patch.dict('os.environ', {}, clear=True)

    result = CliRunner().invoke(cli, ['plan', str(examples / 'calculator.py')])

    assert result.exit_code == 0, result.output
    content = yaml.safe_load(result.output)
    assert len(content) == 11
    assert content[0] == {
        'suite': 'calculator',
        'test': 'adds',
        'location': f'{examples / "calculator.py"}:23',
        'skipped': False,
        'expectation': 'ok',
        'timeout': 10_000,
        'run': 0,
        'runs': 2,
    }
    assert content[-1]['suite'] == ''
    assert content[-1]['timeout'] == 30_000


def test_plan_json_with_timeout(examples: 'Path') -> None:
    """JSON output honors the timeout override."""
    result = CliRunner().invoke(cli, [
        'plan', '--format', 'json', '--timeout', '0',
        str(examples / 'calculator.py'),
    ])

    assert result.exit_code == 0, result.output
    content = json.loads(result.output)
    assert {item['timeout'] for item in content[:-1]} == {100_000_000}
    assert [item['run'] for item in content if item['test'] == 'subtracts'] == [0, 1, 2, 3]


def test_plan_focus(examples: 'Path') -> None:
    """Focused entities narrow the plan across modules."""
    with pytest.warns(FocusWarning):
        result = CliRunner().invoke(cli, [
            'plan', '-f', 'json',
            str(examples / 'calculator.py'),
            str(examples / 'focused.py'),
        ])

    assert result.exit_code == 0, result.output
    content = json.loads(result.output)
    assert [f"{item['suite']} {item['test']}" for item in content] == [
        'unit focused one',
        'integration first',
        'integration second',
    ]


def test_plan_forbid_focus(examples: 'Path') -> None:
    """Forbidden focus fails the command."""
    result = CliRunner().invoke(cli, [
        'plan', '--forbid-focus', str(examples / 'focused.py'),
    ])

    assert result.exit_code == 1
    assert 'Focused suites or tests are forbidden' in result.output


def test_plan_broken_module(examples: 'Path') -> None:
    """Load errors are reported without a traceback."""
    result = CliRunner().invoke(cli, ['plan', str(examples / 'broken.py')])

    assert result.exit_code == 1
    assert 'Failed to load spec module' in result.output
    assert 'Traceback' not in result.output


def test_plan_requires_paths() -> None:
    """At least one module is required."""
    result = CliRunner().invoke(cli, ['plan'])

    assert result.exit_code == 2
