"""CLI utilities for inspecting pytest-arbor run plans.

The `plan` command loads spec modules, applies focus and repeat counts
exactly as the pytest plugin does and prints the resulting runs.
"""

from json import dumps
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from click import Choice, ClickException, argument, echo, group, option
from click import Path as PathParam
from pydantic import Field
from yaml import safe_dump

from pytest_arbor.errors import ArborError
from pytest_arbor.models import SchemaModel
from pytest_arbor.runtime import Runtime
from pytest_arbor.settings import ArborSettings

if TYPE_CHECKING:
    from pytest_arbor.core import Repeater
    from pytest_arbor.tree import TestRun

SpecFilepath = PathParam(
    exists=True,
    dir_okay=False,
    readable=True,
    path_type=Path,
)


class PlannedRun(SchemaModel):
    """Printable description of a single test run."""

    suite: str = Field(title='Enclosing suite full name')
    test: str = Field(title='Test name')
    location: str = Field(title='Declaration location')
    skipped: bool = Field(title='Test skip flag')
    expectation: Literal['ok', 'fail'] = Field(title='Test expectation')
    timeout: int = Field(title='Timeout in milliseconds')
    run: int = Field(title='Run index')
    runs: int = Field(title='Total runs of the test')

    @classmethod
    def from_run(cls, run: 'TestRun', repeater: 'Repeater') -> 'PlannedRun':
        """Describe a test run."""
        test = run.test()

        return cls(
            suite=test.suite().full_name(),
            test=test.name(),
            location=str(test.location()),
            skipped=test.skipped(),
            expectation=test.expectation().value,
            timeout=test.timeout(),
            run=run.index(),
            runs=repeater.total(test),
        )


@group(help='Command-line utilities for pytest-arbor spec modules.')
def cli() -> None:
    """Root CLI group for pytest-arbor tools."""
    return None


@cli.command(
    name='plan',
    help='Print the runs selected from spec modules after focus and repeats.',
)
@option(
    '-f', '--format', 'output_format',
    type=Choice(['yaml', 'json']),
    default='yaml',
    show_default=True,
    help='Output format.',
)
@option(
    '-t', '--timeout',
    type=int,
    default=None,
    help='Default test timeout in milliseconds; 0 disables timeouts.',
)
@option(
    '--forbid-focus',
    is_flag=True,
    default=False,
    help='Fail when some suites or tests are focused.',
)
@argument(
    'paths',
    nargs=-1,
    required=True,
    type=SpecFilepath,
)
def print_plan(paths: tuple[Path, ...], output_format: str,
               timeout: int | None, forbid_focus: bool) -> None:
    """Load spec modules and print their run plan.

    Args:
        paths: Spec modules to load, in order.
        output_format: `yaml` or `json`.
        timeout: Default timeout override.
        forbid_focus: Forbid focus, keeping the configured policy when unset.
    """
    runtime = Runtime(ArborSettings().merge(
        timeout=timeout,
        forbid_focus=forbid_focus or None,
    ))

    try:
        for path in paths:
            runtime.load(path)
        runs = runtime.plan()

    except ArborError as error:
        raise ClickException(str(error)) from error

    content = [
        PlannedRun.from_run(run, runtime.repeater).model_dump()
        for run in runs
    ]

    if output_format == 'json':
        echo(dumps(content, ensure_ascii=False, indent=4))
    else:
        echo(safe_dump(content, sort_keys=False, allow_unicode=True), nl=False)


if __name__ == '__main__':
    cli()
