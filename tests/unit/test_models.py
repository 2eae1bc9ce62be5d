"""Tests for the frozen pydantic records."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from gitgen.models import (
    LogEntry,
    RepoConfig,
    SpecFrontmatter,
    SpecStatus,
    SpecStatusEntry,
    StatusReport,
    TokenUsage,
)


class TestSpecFrontmatter:
    def test_scalar_context_becomes_list(self):
        fm = SpecFrontmatter.from_mapping({"context": "./a.py", "skills": "python"})
        assert fm.context == ["./a.py"]
        assert fm.skills == ["python"]

    def test_unknown_keys_go_to_extensions_in_order(self):
        fm = SpecFrontmatter.from_mapping({"zeta": 1, "name": "n", "alpha": [2]})
        assert fm.extensions == {"zeta": 1, "alpha": [2]}
        assert list(fm.as_mapping()) == ["name", "zeta", "alpha"]

    def test_explicit_null_is_present(self):
        fm = SpecFrontmatter.from_mapping({"output": None})
        assert "output" in fm.as_mapping()
        assert "name" not in fm.as_mapping()
        assert fm.get("output", "fallback") is None
        assert fm.get("name", "fallback") == "fallback"

    def test_frozen(self):
        fm = SpecFrontmatter(name="a")
        with pytest.raises(ValidationError):
            fm.name = "b"


class TestStoreRecords:
    def test_token_usage_adds(self):
        total = TokenUsage(input=3, output=4) + TokenUsage(input=1, output=2)
        assert (total.input, total.output, total.total) == (4, 6, 10)

    def test_log_entry_round_trips_through_json(self):
        entry = LogEntry(
            hash="a" * 64,
            message="m",
            spec_path=Path("/r/a.gitgen.md"),
            output_path=Path("/r/a.txt"),
            content_hash="b" * 64,
            model="template",
        )
        assert LogEntry.model_validate_json(entry.model_dump_json()) == entry
        assert entry.short_hash == "aaaaaaa"

    def test_repo_config_keeps_unknown_keys(self):
        config = RepoConfig.model_validate({"provider": "template", "providers": {"x": 1}})
        assert config.default_branch == "main"
        assert config.model_dump()["providers"] == {"x": 1}


class TestStatusReport:
    def test_clean_only_when_everything_up_to_date(self):
        entry = SpecStatusEntry(
            spec_path=Path("/r/a.gitgen.md"), output_path=Path("/r/a"), status=SpecStatus.UP_TO_DATE
        )
        assert StatusReport(branch="main", specs=[entry]).is_clean
        stale = entry.model_copy(update={"status": SpecStatus.MODIFIED})
        report = StatusReport(branch="main", specs=[entry, stale])
        assert not report.is_clean
        assert report.with_status(SpecStatus.MODIFIED) == [stale]
