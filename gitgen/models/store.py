"""Records persisted under ``.gitgen/`` — index, log entries and config."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BRANCH = "main"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StagedSpec(BaseModel):
    """A spec pending generation.  One entry per ``spec_path``."""

    model_config = ConfigDict(frozen=True)

    spec_path: Path
    spec_hash: str
    output_path: Path
    predicted_hash: str | None = None
    staged_at: datetime = Field(default_factory=_utcnow)


class StagingIndexState(BaseModel):
    """Contents of ``.gitgen/index``."""

    model_config = ConfigDict(frozen=True)

    staged: list[StagedSpec] = Field(default_factory=list)
    last_commit: str | None = None


class TokenUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    input: int = 0
    output: int = 0

    @property
    def total(self) -> int:
        return self.input + self.output

    def __add__(self, other: TokenUsage) -> TokenUsage:
        return TokenUsage(input=self.input + other.input, output=self.output + other.output)


class LogEntry(BaseModel):
    """One line of ``logs/generations.jsonl``.

    Entries are append-only: nothing rewrites or deletes them, and a
    reset is recorded as a new entry.
    """

    model_config = ConfigDict(frozen=True)

    hash: str
    message: str
    spec_path: Path
    output_path: Path
    content_hash: str
    timestamp: datetime = Field(default_factory=_utcnow)
    model: str
    tokens: TokenUsage = Field(default_factory=TokenUsage)

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


class RepoConfig(BaseModel):
    """Repository-scoped settings stored in ``.gitgen/config``.

    Unknown keys are kept so ``gitgen config set`` can address
    arbitrary dot paths.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    provider: str | None = None
    model: str | None = None
    default_branch: str = DEFAULT_BRANCH
