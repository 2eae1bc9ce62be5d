"""``gitgen add`` — stage a spec, or create one for an existing file."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from gitgen.cli.common import console, open_orchestrator, relative_to, reporting_errors


def add_cmd(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="Specs to stage, or files to create specs for."),
    name: str = typer.Option(None, "--name", help="Name for a newly created spec."),
    description: str = typer.Option(
        None, "--description", "-d", help="Description for a newly created spec."
    ),
    context: list[str] = typer.Option(
        None, "--context", "-c", help="Context file for a newly created spec (repeatable)."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing spec."),
) -> None:
    """Stage specs for the next commit."""
    with reporting_errors():
        orchestrator = open_orchestrator(ctx, files[0].parent)
        root = orchestrator.repository.root
        for file in files:
            result = orchestrator.add(
                file,
                name=name,
                description=description,
                context=context or (),
                force=force,
            )
            spec = escape(relative_to(result.spec_path, root))
            output = escape(relative_to(result.output_path, root))
            if result.created:
                console.print(f"[green]Created[/green] {spec}")
            console.print(f"[green]Staged[/green] {spec} -> {output}")
