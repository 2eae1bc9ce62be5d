"""``gitgen status`` — which specs need generating."""

from __future__ import annotations

import typer

from gitgen.cli.common import console, open_orchestrator, reporting_errors
from gitgen.cli.renderer import GitGenRenderer


def status_cmd(ctx: typer.Context) -> None:
    """Show staged, modified, missing and untracked specs."""
    with reporting_errors():
        orchestrator = open_orchestrator(ctx)
        report = orchestrator.status()
    GitGenRenderer(console, orchestrator.repository.root).status(report)
