"""``gitgen validate`` — check specs and the files they reference."""

from __future__ import annotations

from pathlib import Path

import typer

from gitgen.cli.common import console, open_orchestrator, reporting_errors, settings_from
from gitgen.cli.renderer import GitGenRenderer
from gitgen.core.layout import is_directory_spec
from gitgen.core.resolver import CascadingResolver
from gitgen.core.validator import Validator


def validate_cmd(
    ctx: typer.Context,
    specs: list[Path] = typer.Argument(
        None, help="Specs to validate (default: every spec in the repository)."
    ),
    no_output_check: bool = typer.Option(
        False, "--no-output-check", help="Do not require output files to exist."
    ),
) -> None:
    """Validate specs.  Exits 1 when any spec has errors."""
    settings = settings_from(ctx)
    root = Path.cwd()
    with reporting_errors():
        if not specs:
            repository = open_orchestrator(ctx).repository
            root = repository.root
            specs = [p for p in repository.find_all_specs() if not is_directory_spec(p)]

    validator = Validator(
        CascadingResolver.from_settings(settings),
        check_output_exists=not no_output_check,
    )
    renderer = GitGenRenderer(console, root)
    failed = 0
    for spec in specs:
        report = validator.validate(spec)
        renderer.validation(report)
        failed += 0 if report.passed else 1

    console.print()
    console.print(f"{len(specs)} spec(s) checked, {failed} failed")
    if failed:
        raise typer.Exit(code=1)
