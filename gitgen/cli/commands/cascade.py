"""``gitgen cascade`` — show how a spec's configuration is assembled."""

from __future__ import annotations

from pathlib import Path

import typer

from gitgen.cli.common import console, open_orchestrator, reporting_errors
from gitgen.cli.renderer import GitGenRenderer


def cascade_cmd(
    ctx: typer.Context,
    spec: Path = typer.Argument(..., exists=True, dir_okay=False, help="Leaf spec to resolve."),
    full: bool = typer.Option(False, "--full", help="Also print the fully merged spec."),
) -> None:
    """Show the cascade chain and merged front-matter for a spec."""
    with reporting_errors():
        orchestrator = open_orchestrator(ctx, spec.parent)
        config = orchestrator.cascade(spec)
    GitGenRenderer(console, orchestrator.repository.root).cascade(config, full=full)
