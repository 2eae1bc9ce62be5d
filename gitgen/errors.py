"""Error hierarchy for gitgen.

Core modules raise these; the CLI is the only place that turns them into
user-facing messages and exit codes.
"""

from __future__ import annotations

from pathlib import Path


class GitGenError(RuntimeError):
    """Base class for every error raised by the gitgen core."""


class NotARepositoryError(GitGenError):
    """Raised when no ``.gitgen/`` directory is found searching upward."""

    def __init__(self, start: Path) -> None:
        self.start = start
        super().__init__(
            f"Not a gitgen repository (or any parent up to root): {start}\n"
            "Run 'gitgen init' to initialize a repository."
        )


class SpecParseError(GitGenError):
    """Raised when a spec file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse {path}: {reason}")


class CircularReferenceError(GitGenError):
    """Raised when a directory is visited twice during the ancestor walk."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        super().__init__(f"Circular reference detected at: {directory}")


class EmptyChainError(GitGenError):
    """Raised when there is nothing to merge."""


class NothingStagedError(GitGenError):
    """Raised when committing with an empty staging index."""

    def __init__(self) -> None:
        super().__init__("Nothing to commit. Use 'gitgen add' to stage specs.")


class ObjectNotFoundError(GitGenError, LookupError):
    """Raised when no object is stored under the requested hash."""

    def __init__(self, object_hash: str) -> None:
        self.object_hash = object_hash
        super().__init__(f"Object not found: {object_hash}")


class ObjectIntegrityError(GitGenError):
    """Raised when a stored object's content does not match its hash."""


class GenerationLogError(GitGenError):
    """Raised when the generation log contains an unreadable line."""


class AmbiguousHashError(GitGenError):
    """Raised when a hash prefix matches more than one generation."""

    def __init__(self, prefix: str, count: int) -> None:
        self.prefix = prefix
        self.count = count
        super().__init__(
            f'Ambiguous hash "{prefix}" matches {count} generations. '
            "Use a longer prefix."
        )


class GenerationNotFoundError(GitGenError, LookupError):
    """Raised when a hash prefix matches no generation."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        super().__init__(f"No generation found with hash: {prefix}")


class MissingOutputError(GitGenError):
    """Raised when staging a spec that declares no output."""

    def __init__(self, spec_path: Path) -> None:
        self.spec_path = spec_path
        super().__init__(f"Spec has no output field, cannot stage: {spec_path}")


class SpecExistsError(GitGenError):
    """Raised when ``add`` would overwrite an existing spec."""

    def __init__(self, spec_path: Path) -> None:
        self.spec_path = spec_path
        super().__init__(
            f"Spec already exists: {spec_path}. Use --force to overwrite."
        )


class GenerationError(GitGenError):
    """Raised when generating content for one staged spec fails."""

    def __init__(self, spec_path: Path, reason: str) -> None:
        self.spec_path = spec_path
        self.reason = reason
        super().__init__(f"Failed to generate {spec_path}: {reason}")


class UnknownPredictorError(GitGenError, LookupError):
    """Raised when a predictor name is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f'Predictor "{name}" not found. '
            f"Available: {', '.join(available) or '(none)'}"
        )


class GitContextError(GitGenError):
    """Raised when git metadata cannot be collected."""


class RepositoryStateError(GitGenError):
    """Raised when ``.gitgen/config`` or ``.gitgen/index`` cannot be decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt repository state in {path}: {reason}")
