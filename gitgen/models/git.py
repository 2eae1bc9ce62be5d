"""Git metadata handed to predictors when ``commit --git`` is requested."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class GitCommit(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash: str
    subject: str
    body: str = ""
    author: str = ""
    author_email: str = ""
    date: datetime | None = None
    files: list[str] = Field(default_factory=list)

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


class GitContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    repo_root: Path
    branch: str
    remote_url: str | None = None
    commits: list[GitCommit] = Field(default_factory=list)
