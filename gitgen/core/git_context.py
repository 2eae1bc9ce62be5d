"""Collect recent git history for a path by shelling out to ``git``."""

from __future__ import annotations

import logging
import os
import subprocess
from datetime import datetime
from pathlib import Path

from gitgen.errors import GitContextError
from gitgen.models.git import GitCommit, GitContext

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 15

# Six NUL-terminated fields per commit; git puts a newline between commits.
_LOG_FORMAT = "%H%x00%s%x00%b%x00%an%x00%ae%x00%aI%x00"
_FIELD_COUNT = 6


def _run_git(args: list[str], cwd: Path) -> str:
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SECONDS,
            check=True,
        )
    except FileNotFoundError as exc:
        raise GitContextError("git executable not found") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitContextError(f"git {' '.join(args)} timed out") from exc
    except subprocess.CalledProcessError as exc:
        raise GitContextError(
            f"git {' '.join(args)} failed: {exc.stderr.strip() or exc.returncode}"
        ) from exc
    return completed.stdout


def _optional_git(args: list[str], cwd: Path) -> str | None:
    """Run git, mapping a failure to ``None`` for values that may legitimately be absent."""
    try:
        return _run_git(args, cwd).strip() or None
    except GitContextError as exc:
        logger.debug("%s", exc)
        return None


def parse_commit_log(output: str) -> list[GitCommit]:
    """Parse ``git log`` output produced with the NUL-separated format."""
    commits: list[GitCommit] = []
    fields = output.split("\x00")
    for start in range(0, len(fields) - _FIELD_COUNT + 1, _FIELD_COUNT):
        commit_hash, subject, body, author, email, date = fields[start : start + _FIELD_COUNT]
        commits.append(
            GitCommit(
                hash=commit_hash.strip(),
                subject=subject,
                body=body.strip(),
                author=author,
                author_email=email,
                date=datetime.fromisoformat(date) if date else None,
            )
        )
    return commits


def extract_git_context(path: Path | str, max_commits: int = 10) -> GitContext:
    """Return branch, remote and recent commits touching *path*.

    Raises
    ------
    GitContextError
        If *path* is not inside a git work tree or ``git`` cannot run.
    """
    target = Path(os.path.abspath(path))
    start = target if target.is_dir() else target.parent
    repo_root = Path(_run_git(["rev-parse", "--show-toplevel"], start).strip())

    branch = _optional_git(["rev-parse", "--abbrev-ref", "HEAD"], repo_root) or "unknown"
    remote_url = _optional_git(["remote", "get-url", "origin"], repo_root)

    relative = os.path.relpath(target, repo_root)
    log_args = ["log", "-n", str(max_commits), f"--pretty=format:{_LOG_FORMAT}"]
    if relative != ".":
        log_args += ["--", relative]
    commits = parse_commit_log(_run_git(log_args, repo_root))

    detailed = []
    for commit in commits:
        files = _run_git(
            ["diff-tree", "--no-commit-id", "--name-only", "-r", commit.hash], repo_root
        ).split()
        detailed.append(commit.model_copy(update={"files": files}))

    logger.debug("Collected %d commit(s) from %s", len(detailed), repo_root)
    return GitContext(
        repo_root=repo_root, branch=branch, remote_url=remote_url, commits=detailed
    )


def format_git_context(context: GitContext) -> str:
    """Render *context* as a markdown section for a prompt."""
    lines = ["## Git Context", "", f"Branch: {context.branch}"]
    if context.remote_url:
        lines.append(f"Remote: {context.remote_url}")
    if context.commits:
        lines += ["", "### Recent Commits", ""]
        for commit in context.commits:
            lines.append(f"- {commit.short_hash} {commit.subject} ({commit.author})")
            for name in commit.files:
                lines.append(f"  - {name}")
    return "\n".join(lines)
