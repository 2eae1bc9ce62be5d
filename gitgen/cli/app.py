"""Main Typer application — imports and registers all CLI commands.

Entry point: ``gitgen`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from gitgen.cli.commands.add import add_cmd
from gitgen.cli.commands.cascade import cascade_cmd
from gitgen.cli.commands.commit import commit_cmd
from gitgen.cli.commands.compact import compact_cmd
from gitgen.cli.commands.config_cmd import config_app
from gitgen.cli.commands.init import init_cmd
from gitgen.cli.commands.log import log_cmd
from gitgen.cli.commands.providers import providers_cmd
from gitgen.cli.commands.reset import reset_cmd
from gitgen.cli.commands.show import show_cmd
from gitgen.cli.commands.status import status_cmd
from gitgen.cli.commands.validate import validate_cmd
from gitgen.config import GitGenSettings
from gitgen.logging import configure_logging

app = typer.Typer(
    name="gitgen",
    help="gitgen: version-controlled, spec-driven file generation.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def root_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Load settings and configure logging for every subcommand."""
    settings = GitGenSettings()
    configure_logging(verbose=verbose, level=settings.log_level)
    ctx.obj = settings


# Register subcommands
app.command(name="init", help="Create an empty gitgen repository.")(init_cmd)
app.command(name="add", help="Stage a spec, or create a spec for a file.")(add_cmd)
app.command(name="commit", help="Generate staged specs.")(commit_cmd)
app.command(name="status", help="Show the state of every spec.")(status_cmd)
app.command(name="log", help="Show generation history.")(log_cmd)
app.command(name="show", help="Show a generation and its content.")(show_cmd)
app.command(name="reset", help="Restore an output from a previous generation.")(reset_cmd)
app.command(name="cascade", help="Show how a spec's configuration cascades.")(cascade_cmd)
app.command(name="compact", help="Merge several specs into one.")(compact_cmd)
app.command(name="validate", help="Check specs and the files they reference.")(validate_cmd)
app.command(name="providers", help="List available predictors.")(providers_cmd)
app.add_typer(config_app, name="config")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
