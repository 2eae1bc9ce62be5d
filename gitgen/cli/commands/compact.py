"""``gitgen compact`` — merge several specs, in the given order, into one.

Does not need a repository.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from gitgen.cli.common import console, reporting_errors, settings_from
from gitgen.core.compactor import DEFAULT_OUTPUT, Compactor
from gitgen.core.merge import ArrayMergeStrategy, BodyMergeStrategy


def compact_cmd(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Specs, in merge order."),
    output: Path = typer.Option(Path(DEFAULT_OUTPUT), "--output", "-o", help="Where to write the result."),
    array_merge: ArrayMergeStrategy = typer.Option(
        ArrayMergeStrategy.DEDUPE, "--array-merge", help="Strategy for array-valued keys."
    ),
    body_merge: BodyMergeStrategy = typer.Option(
        None, "--body-merge", help="Strategy for bodies (default from settings)."
    ),
    resolve_paths: bool = typer.Option(
        False, "--resolve-paths", help="Keep context and skills paths absolute."
    ),
    stdout: bool = typer.Option(False, "--stdout", help="Print instead of writing a file."),
) -> None:
    """Compact multiple specs into one."""
    settings = settings_from(ctx)
    target = output.resolve()
    compactor = Compactor(
        array_merge=array_merge,
        body_merge=body_merge or settings.body_merge,
        output=target.name,
        resolve_paths=resolve_paths,
        base_path=target.parent,
    )
    with reporting_errors():
        merged = compactor.compact(files)
    text = Compactor.serialize(merged)

    if stdout:
        console.print(text, markup=False, highlight=False, end="")
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    console.print(
        f"[green]Compacted {len(merged.sources)} spec(s) into[/green] {escape(str(output))}"
    )
