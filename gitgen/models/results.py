"""Result records returned by orchestrator operations."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from gitgen.models.store import LogEntry, TokenUsage


class PredictedContent(BaseModel):
    """What a predictor hands back for one spec."""

    model_config = ConfigDict(frozen=True)

    content: str
    hash: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def tokens(self) -> TokenUsage:
        return TokenUsage(input=self.input_tokens, output=self.output_tokens)


class AddResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    spec_path: Path
    output_path: Path
    created: bool
    staged: bool


class CommittedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    spec_path: Path
    output_path: Path
    content_hash: str
    tokens: TokenUsage = Field(default_factory=TokenUsage)


class CommitResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash: str
    message: str
    branch: str
    files: list[CommittedFile]
    total_tokens: TokenUsage
    dry_run: bool = False


class SpecStatus(str, Enum):
    """Lifecycle position of a spec relative to its output file."""

    STAGED = "staged"
    MODIFIED = "modified"
    MISSING = "missing"
    UNTRACKED = "untracked"
    UP_TO_DATE = "up-to-date"


class SpecStatusEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    spec_path: Path
    output_path: Path
    status: SpecStatus


class StatusReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    branch: str
    head: str | None = None
    specs: list[SpecStatusEntry] = Field(default_factory=list)

    def with_status(self, status: SpecStatus) -> list[SpecStatusEntry]:
        return [s for s in self.specs if s.status == status]

    @property
    def is_clean(self) -> bool:
        return all(s.status == SpecStatus.UP_TO_DATE for s in self.specs)


class ResetResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry: LogEntry
    output_path: Path
    written: bool


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    message: str
    details: str = ""


class ValidationReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    spec_path: Path
    output_path: Path | None = None
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors
