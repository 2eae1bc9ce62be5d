"""Orchestrator — the operations behind every repository command.

The Orchestrator wires together the Repository (index, log, refs,
objects), the CascadingResolver and a PredictorRegistry.  It never
prints and never exits; the CLI renders its results and errors.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from gitgen.config import GitGenSettings
from gitgen.core.git_context import extract_git_context
from gitgen.core.hasher import compute_generation_hash, sha256_hex
from gitgen.core.layout import SPEC_SUFFIX, is_directory_spec
from gitgen.core.parser import format_spec
from gitgen.core.predictor import Predictor, PredictorRegistry
from gitgen.core.repository import Repository
from gitgen.core.resolver import CascadingResolver
from gitgen.errors import (
    AmbiguousHashError,
    GenerationError,
    GenerationNotFoundError,
    GitGenError,
    MissingOutputError,
    NothingStagedError,
    SpecExistsError,
)
from gitgen.models.results import (
    AddResult,
    CommitResult,
    CommittedFile,
    ResetResult,
    SpecStatus,
    SpecStatusEntry,
    StatusReport,
)
from gitgen.models.spec import ResolvedConfig, SpecFrontmatter
from gitgen.models.store import LogEntry, StagedSpec, TokenUsage

logger = logging.getLogger(__name__)

_CURRENT_CONTENT_LIMIT = 1000

_FILE_KINDS: dict[str, str] = {
    ".md": "documentation",
    ".py": "Python code",
    ".ts": "TypeScript code",
    ".tsx": "React TypeScript component",
    ".js": "JavaScript code",
    ".jsx": "React JavaScript component",
    ".go": "Go code",
    ".rs": "Rust code",
    ".json": "JSON configuration",
    ".yaml": "YAML configuration",
    ".yml": "YAML configuration",
    ".toml": "TOML configuration",
    ".css": "CSS styles",
    ".html": "HTML markup",
}


def infer_name(path: Path) -> str:
    """``api-client.py`` -> ``Api Client``"""
    return path.stem.replace("-", " ").replace("_", " ").title()


def infer_description(path: Path) -> str:
    stem = path.stem
    if stem.lower() == "readme":
        return "Generate README documentation for the project"
    if "test" in stem.lower():
        subject = stem.lower().replace("test_", "").replace("_test", "").replace(".test", "")
        return f"Generate tests for {subject}"
    return f"Generate {_FILE_KINDS.get(path.suffix, 'file')} for {stem}"


def _new_spec_body(description: str, existing_content: str) -> str:
    lines = [
        description,
        "",
        "## Requirements",
        "",
        "- Follow existing code style and conventions",
        "- Include appropriate comments and documentation",
    ]
    if existing_content.strip():
        lines += ["", "## Current Content", "", "The file currently contains:", "", "```"]
        lines.append(existing_content[:_CURRENT_CONTENT_LIMIT].rstrip("\n"))
        if len(existing_content) > _CURRENT_CONTENT_LIMIT:
            lines.append("... (truncated)")
        lines.append("```")
    return "\n".join(lines)


def _read_if_exists(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


class Orchestrator:
    """Repository command engine.

    Parameters
    ----------
    repository:
        The repository to operate on.
    resolver:
        Cascade resolver.  Built from *settings* when omitted.
    registry:
        Predictors available to ``commit``.  Built-ins only when omitted.
    settings:
        Process settings.  Defaults to ``GitGenSettings()``.
    """

    def __init__(
        self,
        repository: Repository,
        resolver: CascadingResolver | None = None,
        registry: PredictorRegistry | None = None,
        settings: GitGenSettings | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings or GitGenSettings()
        self.resolver = resolver or CascadingResolver.from_settings(self.settings)
        self.registry = registry or PredictorRegistry.with_builtins()

    # ------------------------------------------------------------------
    # add
    # ------------------------------------------------------------------

    def add(
        self,
        path: Path | str,
        *,
        name: str | None = None,
        description: str | None = None,
        context: Iterable[str] = (),
        force: bool = False,
    ) -> AddResult:
        """Stage an existing spec, or create and stage a spec for a regular file."""
        target = Path(os.path.abspath(path))
        if target.name.endswith(SPEC_SUFFIX):
            return self._stage_existing(target)
        return self._create_spec(
            target, name=name, description=description, context=list(context), force=force
        )

    def _output_for(self, spec_path: Path) -> Path:
        resolved = self.resolver.resolve(spec_path)
        output = resolved.frontmatter.output
        if not output:
            raise MissingOutputError(spec_path)
        return Path(os.path.normpath(os.path.join(spec_path.parent, output)))

    def _stage_existing(self, spec_path: Path) -> AddResult:
        output_path = self._output_for(spec_path)
        spec_hash = sha256_hex(spec_path.read_bytes())
        self.repository.index.stage(spec_path, spec_hash, output_path)
        return AddResult(
            spec_path=spec_path, output_path=output_path, created=False, staged=True
        )

    def _create_spec(
        self,
        target: Path,
        *,
        name: str | None,
        description: str | None,
        context: list[str],
        force: bool,
    ) -> AddResult:
        spec_path = target.with_name(f"{target.stem}{SPEC_SUFFIX}")
        if spec_path.exists() and not force:
            raise SpecExistsError(spec_path)

        existing = _read_if_exists(target) or ""
        description = description or infer_description(target)
        fields: dict = {"name": name or infer_name(target), "description": description}
        if context:
            fields["context"] = context
        fields["output"] = target.name

        text = format_spec(
            SpecFrontmatter.from_mapping(fields), _new_spec_body(description, existing)
        )
        spec_path.write_text(text, encoding="utf-8")
        logger.info("Created spec %s", spec_path)

        self.repository.index.stage(spec_path, sha256_hex(text), target)
        return AddResult(spec_path=spec_path, output_path=target, created=True, staged=True)

    # ------------------------------------------------------------------
    # commit
    # ------------------------------------------------------------------

    def _select_predictor(self, name: str | None) -> Predictor:
        if name:
            return self.registry.get(name)
        configured = self.repository.read_config().provider
        return self.registry.get(configured or self.settings.default_provider)

    def commit(
        self,
        message: str | None = None,
        *,
        dry_run: bool = False,
        use_git: bool = False,
        predictor: str | None = None,
    ) -> CommitResult:
        """Generate every staged spec, then advance the branch and clear the index.

        Lifecycle per staged spec:
        1. Resolve the cascade
        2. Predict content
        3. Write the output file
        4. Store the object
        5. Append a log entry

        A failure raises ``GenerationError`` before the branch ref or the
        index is touched.  Specs already generated in this run keep their
        outputs and log entries and stay staged.
        """
        staged = self.repository.index.staged()
        if not staged:
            raise NothingStagedError()

        backend = self._select_predictor(predictor)
        branch = self.repository.current_branch()
        message = message or f"Generate {len(staged)} file(s)"

        files: list[CommittedFile] = []
        total = TokenUsage()
        for entry in staged:
            committed = self._generate(entry, backend, message, dry_run=dry_run, use_git=use_git)
            files.append(committed)
            total = total + committed.tokens

        commit_hash = self.repository.create_commit_hash(
            message,
            [{"spec_path": str(f.spec_path), "content_hash": f.content_hash} for f in files],
        )
        if not dry_run:
            self.repository.update_branch_ref(branch, commit_hash)
            self.repository.index.record_commit(commit_hash)
            logger.info("Committed %s on %s (%d file(s))", commit_hash[:7], branch, len(files))

        return CommitResult(
            hash=commit_hash,
            message=message,
            branch=branch,
            files=files,
            total_tokens=total,
            dry_run=dry_run,
        )

    def _generate(
        self,
        entry: StagedSpec,
        backend: Predictor,
        message: str,
        *,
        dry_run: bool,
        use_git: bool,
    ) -> CommittedFile:
        logger.debug("Generating %s -> %s", entry.spec_path, entry.output_path)
        try:
            config = self.resolver.resolve(entry.spec_path)
            git_context = extract_git_context(entry.spec_path) if use_git else None
            existing = _read_if_exists(entry.output_path)
            prediction = backend.predict(config, existing, git_context)
        except Exception as exc:
            reason = str(exc) if isinstance(exc, GitGenError) else f"{type(exc).__name__}: {exc}"
            raise GenerationError(entry.spec_path, reason) from exc

        if not dry_run:
            entry.output_path.parent.mkdir(parents=True, exist_ok=True)
            entry.output_path.write_text(prediction.content, encoding="utf-8")
            content_hash = self.repository.write_object(prediction.content)
            timestamp = datetime.now(timezone.utc)
            self.repository.log.append(
                LogEntry(
                    hash=compute_generation_hash(
                        str(entry.spec_path),
                        str(entry.output_path),
                        content_hash,
                        message,
                        timestamp,
                    ),
                    message=message,
                    spec_path=entry.spec_path,
                    output_path=entry.output_path,
                    content_hash=content_hash,
                    timestamp=timestamp,
                    model=prediction.model,
                    tokens=prediction.tokens,
                )
            )
        else:
            content_hash = prediction.hash

        return CommittedFile(
            spec_path=entry.spec_path,
            output_path=entry.output_path,
            content_hash=content_hash,
            tokens=prediction.tokens,
        )

    # ------------------------------------------------------------------
    # status
    # ------------------------------------------------------------------

    def status(self) -> StatusReport:
        """Classify every output-producing spec in the repository."""
        staged = {s.spec_path for s in self.repository.index.staged()}
        logged = {e.spec_path for e in self.repository.log.entries()}

        specs: list[SpecStatusEntry] = []
        for spec_path in self.repository.find_all_specs():
            if is_directory_spec(spec_path):
                continue
            try:
                output_path = self._output_for(spec_path)
            except MissingOutputError:
                continue
            except GitGenError as exc:
                logger.warning("Skipping %s: %s", spec_path, exc)
                continue

            if spec_path in staged:
                status = SpecStatus.STAGED
            elif not output_path.exists():
                status = SpecStatus.MISSING
            elif spec_path not in logged:
                status = SpecStatus.UNTRACKED
            elif spec_path.stat().st_mtime > output_path.stat().st_mtime:
                status = SpecStatus.MODIFIED
            else:
                status = SpecStatus.UP_TO_DATE
            specs.append(
                SpecStatusEntry(spec_path=spec_path, output_path=output_path, status=status)
            )

        branch = self.repository.current_branch()
        return StatusReport(
            branch=branch, head=self.repository.get_branch_ref(branch), specs=specs
        )

    # ------------------------------------------------------------------
    # history: log / show / reset
    # ------------------------------------------------------------------

    def log(self, spec: Path | str | None = None, limit: int | None = None) -> list[LogEntry]:
        return self.repository.log.read(spec, limit or self.settings.log_limit)

    def find_generation(self, prefix: str) -> LogEntry:
        """Look up the one log entry whose entry hash or content hash starts with *prefix*.

        Raises
        ------
        GenerationNotFoundError
            If no entry matches.
        AmbiguousHashError
            If more than one entry matches, through either hash.
        """
        matches = [
            e
            for e in self.repository.log.entries()
            if e.hash.startswith(prefix) or e.content_hash.startswith(prefix)
        ]
        if not matches:
            raise GenerationNotFoundError(prefix)
        if len(matches) > 1:
            raise AmbiguousHashError(prefix, len(matches))
        return matches[0]

    def show(self, prefix: str) -> tuple[LogEntry, str]:
        entry = self.find_generation(prefix)
        return entry, self.repository.read_object(entry.content_hash)

    def reset(self, prefix: str, *, hard: bool = False) -> ResetResult:
        """Restore the output recorded by a generation.

        Without *hard* this only reports what would be restored.
        """
        entry = self.find_generation(prefix)
        content = self.repository.read_object(entry.content_hash)
        if not hard:
            return ResetResult(entry=entry, output_path=entry.output_path, written=False)

        entry.output_path.parent.mkdir(parents=True, exist_ok=True)
        entry.output_path.write_text(content, encoding="utf-8")
        message = f"Reset to {entry.short_hash}"
        timestamp = datetime.now(timezone.utc)
        self.repository.log.append(
            LogEntry(
                hash=compute_generation_hash(
                    str(entry.spec_path),
                    str(entry.output_path),
                    entry.content_hash,
                    message,
                    timestamp,
                ),
                message=message,
                spec_path=entry.spec_path,
                output_path=entry.output_path,
                content_hash=entry.content_hash,
                timestamp=timestamp,
                model=entry.model,
                tokens=TokenUsage(),
            )
        )
        logger.info("Reset %s to %s", entry.output_path, entry.short_hash)
        return ResetResult(entry=entry, output_path=entry.output_path, written=True)

    # ------------------------------------------------------------------
    # cascade
    # ------------------------------------------------------------------

    def cascade(self, spec: Path | str) -> ResolvedConfig:
        return self.resolver.resolve(spec)
