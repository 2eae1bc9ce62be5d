"""Process-level settings — env-driven.

Reads ``GITGEN_*`` environment variables and an optional ``.env`` file.
Repository-scoped values (provider, model, default branch) live in
``.gitgen/config`` instead; see ``gitgen.core.repository``.

Examples
--------
Override via environment::

    export GITGEN_LOG_LEVEL=DEBUG
    export GITGEN_SKILLS_MERGE=concatenate
    export GITGEN_MAX_DEPTH=4
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitgen.core.merge import ArrayMergeStrategy, BodyMergeStrategy


class GitGenSettings(BaseSettings):
    """Settings shared by every command in one process."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GITGEN_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"

    # Cascade resolution
    max_depth: int = Field(default=10, gt=0)
    context_merge: ArrayMergeStrategy = ArrayMergeStrategy.DEDUPE
    skills_merge: ArrayMergeStrategy = ArrayMergeStrategy.DEDUPE
    body_merge: BodyMergeStrategy = BodyMergeStrategy.APPEND

    # Generation
    default_provider: str = "template"
    default_model: str | None = None

    # History
    log_limit: int = Field(default=10, gt=0)
