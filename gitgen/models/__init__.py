"""gitgen data models — all Pydantic v2, all frozen (immutable)."""

from gitgen.models.git import GitCommit, GitContext
from gitgen.models.results import (
    AddResult,
    CommitResult,
    CommittedFile,
    PredictedContent,
    ResetResult,
    SpecStatus,
    SpecStatusEntry,
    StatusReport,
    ValidationIssue,
    ValidationReport,
)
from gitgen.models.spec import (
    MergedSpec,
    OneShotExample,
    ResolvedConfig,
    SpecFile,
    SpecFrontmatter,
)
from gitgen.models.store import (
    DEFAULT_BRANCH,
    LogEntry,
    RepoConfig,
    StagedSpec,
    StagingIndexState,
    TokenUsage,
)

__all__ = [
    # spec
    "OneShotExample",
    "SpecFrontmatter",
    "SpecFile",
    "ResolvedConfig",
    "MergedSpec",
    # store
    "DEFAULT_BRANCH",
    "StagedSpec",
    "StagingIndexState",
    "TokenUsage",
    "LogEntry",
    "RepoConfig",
    # git
    "GitCommit",
    "GitContext",
    # results
    "PredictedContent",
    "AddResult",
    "CommittedFile",
    "CommitResult",
    "SpecStatus",
    "SpecStatusEntry",
    "StatusReport",
    "ResetResult",
    "ValidationIssue",
    "ValidationReport",
]
