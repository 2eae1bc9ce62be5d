"""Rich terminal rendering for gitgen command results.

Color scheme
------------
- green   : staged, committed, passed
- yellow  : modified, warnings, dry runs
- red     : missing, errors
- cyan    : untracked
- dim     : up to date, hashes and metadata
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from gitgen.cli.common import relative_to
from gitgen.core.parser import format_spec
from gitgen.models.results import (
    CommitResult,
    ResetResult,
    SpecStatus,
    StatusReport,
    ValidationReport,
)
from gitgen.models.spec import ResolvedConfig
from gitgen.models.store import LogEntry

_STATUS_STYLES: dict[SpecStatus, str] = {
    SpecStatus.STAGED: "green",
    SpecStatus.MODIFIED: "yellow",
    SpecStatus.MISSING: "red",
    SpecStatus.UNTRACKED: "cyan",
    SpecStatus.UP_TO_DATE: "dim",
}

_STATUS_HEADINGS: dict[SpecStatus, str] = {
    SpecStatus.STAGED: "Changes to be generated:",
    SpecStatus.MODIFIED: "Specs modified since last generation:",
    SpecStatus.MISSING: "Specs with missing output:",
    SpecStatus.UNTRACKED: "Outputs never generated by gitgen:",
}


class GitGenRenderer:
    """Renders orchestrator results for the terminal.

    Parameters
    ----------
    console:
        Destination console.
    root:
        Paths beneath this directory are shown relative to it.
    """

    def __init__(self, console: Console, root: Path | None = None) -> None:
        self.console = console
        self.root = root or Path.cwd()

    def _rel(self, path: Path) -> str:
        return escape(relative_to(path, self.root))

    # ------------------------------------------------------------------
    # commit
    # ------------------------------------------------------------------

    def commit(self, result: CommitResult) -> None:
        if result.dry_run:
            self.console.print("[bold yellow]\\[DRY RUN] Would commit:[/bold yellow]")
        self.console.print(
            f"[bold green]{escape(f'[{result.branch} {result.hash[:7]}]')}[/bold green] "
            f"{escape(result.message)}"
        )
        for f in result.files:
            self.console.print(
                f"  [green]generate[/green] {self._rel(f.output_path)} "
                f"[dim]({f.tokens.input}/{f.tokens.output} tokens)[/dim]"
            )
        self.console.print(
            f"[dim]{len(result.files)} file(s), {result.total_tokens.total} total tokens[/dim]"
        )

    # ------------------------------------------------------------------
    # status
    # ------------------------------------------------------------------

    def status(self, report: StatusReport) -> None:
        self.console.print(f"On branch [bold]{escape(report.branch)}[/bold]")
        if report.head is None:
            self.console.print("[dim]No commits yet[/dim]")

        for status, heading in _STATUS_HEADINGS.items():
            entries = report.with_status(status)
            if not entries:
                continue
            style = _STATUS_STYLES[status]
            self.console.print()
            self.console.print(heading)
            for entry in entries:
                self.console.print(
                    f"  [{style}]{status.value:>10}[/{style}]  "
                    f"{self._rel(entry.spec_path)} -> {self._rel(entry.output_path)}"
                )

        self.console.print()
        if not report.specs:
            self.console.print("[dim]No specs found.[/dim]")
        elif report.is_clean:
            self.console.print("[green]Nothing to generate, all outputs up to date.[/green]")

    # ------------------------------------------------------------------
    # history
    # ------------------------------------------------------------------

    def log(self, entries: list[LogEntry]) -> None:
        if not entries:
            self.console.print("[dim]No generations yet.[/dim]")
            return
        for entry in entries:
            self.console.print(
                f"[yellow]generation {entry.short_hash}[/yellow] {escape(entry.message)}"
            )
            self.console.print(
                f"  [dim]{entry.timestamp:%Y-%m-%d %H:%M:%S %Z}  {escape(entry.model)}  "
                f"{entry.tokens.total} tokens[/dim]"
            )
            self.console.print(
                f"  {self._rel(entry.spec_path)} -> {self._rel(entry.output_path)}"
            )

    def show(self, entry: LogEntry, content: str) -> None:
        header = "\n".join([
            f"[bold]Generation:[/bold] {entry.hash}",
            f"[bold]Message:[/bold]    {escape(entry.message)}",
            f"[bold]Spec:[/bold]       {self._rel(entry.spec_path)}",
            f"[bold]Output:[/bold]     {self._rel(entry.output_path)}",
            f"[bold]Content:[/bold]    {entry.content_hash}",
            f"[bold]Date:[/bold]       {entry.timestamp:%Y-%m-%d %H:%M:%S %Z}",
            f"[bold]Model:[/bold]      {escape(entry.model)}",
            f"[bold]Tokens:[/bold]     {entry.tokens.input} in / {entry.tokens.output} out",
        ])
        self.console.print(Panel(header, border_style="yellow", padding=(0, 1)))
        self.console.print(content, markup=False, highlight=False, end="")

    def reset(self, result: ResetResult) -> None:
        short = result.entry.short_hash
        if result.written:
            self.console.print(
                f"[green]Reset {self._rel(result.output_path)} to {short}[/green]"
            )
        else:
            self.console.print(
                f"Generation {short} would restore {self._rel(result.output_path)}"
            )
            self.console.print("[dim]Use --hard to write it.[/dim]")

    # ------------------------------------------------------------------
    # specs
    # ------------------------------------------------------------------

    def cascade(self, config: ResolvedConfig, *, full: bool = False) -> None:
        tree = Tree(f"[bold]Cascade for {self._rel(config.file_path)}[/bold]")
        for depth, spec in enumerate(config.chain):
            tree.add(f"[cyan]{depth}[/cyan] {self._rel(spec.file_path)}")
        self.console.print(tree)

        table = Table(title="Merged front-matter", show_header=True)
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key, value in config.frontmatter.as_mapping().items():
            table.add_row(escape(key), escape(str(value)))
        self.console.print(table)

        if full:
            text = format_spec(config.frontmatter, config.body, config.examples)
            self.console.print(Syntax(text, "markdown", word_wrap=True))

    def validation(self, report: ValidationReport) -> None:
        mark = "[green]PASS[/green]" if report.passed else "[bold red]FAIL[/bold red]"
        self.console.print(f"{mark} {self._rel(report.spec_path)}")
        for issue in report.errors:
            self.console.print(
                f"  [red]error[/red] {escape(f'[{issue.kind}]')} {escape(issue.message)}"
            )
            if issue.details:
                self.console.print(f"        [dim]{escape(issue.details)}[/dim]")
        for issue in report.warnings:
            self.console.print(
                f"  [yellow]warning[/yellow] {escape(f'[{issue.kind}]')} {escape(issue.message)}"
            )
