"""Tests for Orchestrator — add, commit, status, history and reset."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from gitgen.core.orchestrator import Orchestrator, infer_description, infer_name
from gitgen.core.predictor import PredictorRegistry, TemplatePredictor
from gitgen.core.repository import Repository
from gitgen.errors import (
    AmbiguousHashError,
    GenerationError,
    GenerationNotFoundError,
    MissingOutputError,
    NothingStagedError,
    SpecExistsError,
    UnknownPredictorError,
)
from gitgen.models.results import SpecStatus
from gitgen.models.store import LogEntry


class FailingPredictor:
    name = "failing"

    def predict(self, config, existing_content, git_context=None):
        raise RuntimeError("backend unavailable")


class FailsOnSecondCall:
    name = "flaky"

    def __init__(self):
        self.inner = TemplatePredictor()
        self.calls = 0

    def predict(self, config, existing_content, git_context=None):
        self.calls += 1
        if self.calls == 2:
            raise RuntimeError("backend unavailable")
        return self.inner.predict(config, existing_content, git_context)


def _touch_older(path: Path, than: Path) -> None:
    st = than.stat()
    os.utime(path, (st.st_atime - 100, st.st_mtime - 100))


class TestAdd:
    def test_stage_existing_spec(self, orchestrator: Orchestrator, write_file, tmp_dir: Path):
        spec = write_file("docs/a.gitgen.md", "---\noutput: ../out/a.md\n---\nBody\n")
        result = orchestrator.add(spec)
        assert result.created is False
        assert result.output_path == tmp_dir / "out" / "a.md"
        staged = orchestrator.repository.index.staged()
        assert [s.spec_path for s in staged] == [spec]

    def test_output_inherited_from_cascade(self, orchestrator: Orchestrator, write_file, tmp_dir: Path):
        write_file("pkg/.gitgen.md", "---\noutput: README.md\n---\n")
        spec = write_file("pkg/readme.gitgen.md", "---\nname: readme\n---\nBody\n")
        assert orchestrator.add(spec).output_path == tmp_dir / "pkg" / "README.md"

    def test_spec_without_output_raises(self, orchestrator: Orchestrator, write_file):
        spec = write_file("a.gitgen.md", "---\nname: a\n---\nBody\n")
        with pytest.raises(MissingOutputError):
            orchestrator.add(spec)
        assert orchestrator.repository.index.staged() == []

    def test_creates_spec_for_regular_file(self, orchestrator: Orchestrator, write_file, tmp_dir: Path):
        target = write_file("src/api-client.py", "def call(): ...\n")
        result = orchestrator.add(target, context=["./types.py"])
        assert result.created is True
        assert result.spec_path == tmp_dir / "src" / "api-client.gitgen.md"
        assert result.output_path == target

        spec = orchestrator.resolver.resolve(result.spec_path)
        assert spec.frontmatter.name == "Api Client"
        assert spec.frontmatter.output == "api-client.py"
        assert spec.frontmatter.context == ["./types.py"]
        assert "def call(): ..." in spec.body
        assert orchestrator.repository.index.is_staged(result.spec_path)

    def test_existing_spec_requires_force(self, orchestrator: Orchestrator, write_file):
        target = write_file("notes.md", "")
        orchestrator.add(target)
        with pytest.raises(SpecExistsError):
            orchestrator.add(target)
        assert orchestrator.add(target, force=True, name="Notes v2").created is True

    def test_infer_helpers(self):
        assert infer_name(Path("my_module.py")) == "My Module"
        assert infer_description(Path("README.md")).startswith("Generate README")
        assert infer_description(Path("test_api.py")) == "Generate tests for api"
        assert infer_description(Path("x.rs")) == "Generate Rust code for x"


class TestCommit:
    def test_nothing_staged(self, orchestrator: Orchestrator):
        with pytest.raises(NothingStagedError):
            orchestrator.commit()
        repo = orchestrator.repository
        assert repo.get_branch_ref("main") is None
        assert repo.log.entries() == []

    def test_commit_generates_and_records(self, orchestrator: Orchestrator, write_file, tmp_dir: Path):
        spec = write_file("a.gitgen.md", "---\noutput: out.txt\n---\nGenerated text.\n")
        orchestrator.add(spec)
        result = orchestrator.commit()

        repo = orchestrator.repository
        out = tmp_dir / "out.txt"
        assert out.read_text() == "Generated text.\n"
        assert result.message == "Generate 1 file(s)"
        assert result.branch == "main"
        assert repo.get_branch_ref("main") == result.hash
        assert repo.index.staged() == []
        assert repo.index.last_commit == result.hash

        entries = repo.log.entries()
        assert len(entries) == 1
        assert entries[0].output_path == out
        assert entries[0].model == "template"
        assert repo.read_object(entries[0].content_hash) == "Generated text.\n"

    def test_log_entry_hashes_are_unique(self, orchestrator: Orchestrator, write_file):
        a = write_file("a.gitgen.md", "---\noutput: a.txt\n---\nSame.\n")
        b = write_file("b.gitgen.md", "---\noutput: b.txt\n---\nSame.\n")
        orchestrator.add(a)
        orchestrator.add(b)
        orchestrator.commit("both")
        first, second = orchestrator.repository.log.entries()
        assert first.content_hash == second.content_hash
        assert first.hash != second.hash

    def test_dry_run_writes_nothing(self, orchestrator: Orchestrator, write_file, tmp_dir: Path):
        spec = write_file("a.gitgen.md", "---\noutput: out.txt\n---\nText.\n")
        orchestrator.add(spec)
        result = orchestrator.commit(dry_run=True)
        repo = orchestrator.repository
        assert result.dry_run is True
        assert len(result.files) == 1
        assert not (tmp_dir / "out.txt").exists()
        assert repo.get_branch_ref("main") is None
        assert repo.log.entries() == []
        assert len(repo.index.staged()) == 1

    def test_failure_keeps_index_and_ref(self, repo: Repository, resolver, settings, write_file):
        registry = PredictorRegistry.with_builtins()
        registry.register(FailingPredictor())
        orchestrator = Orchestrator(repo, resolver=resolver, registry=registry, settings=settings)
        orchestrator.add(write_file("a.gitgen.md", "---\noutput: a.txt\n---\nA\n"))

        with pytest.raises(GenerationError) as excinfo:
            orchestrator.commit(predictor="failing")
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert repo.get_branch_ref("main") is None
        assert len(repo.index.staged()) == 1

    def test_partial_failure_keeps_earlier_outputs(
        self, repo: Repository, resolver, settings, write_file, tmp_dir: Path
    ):
        registry = PredictorRegistry.with_builtins()
        registry.register(FailsOnSecondCall())
        orchestrator = Orchestrator(repo, resolver=resolver, registry=registry, settings=settings)
        a = write_file("a.gitgen.md", "---\noutput: a.txt\n---\nA\n")
        b = write_file("b.gitgen.md", "---\noutput: b.txt\n---\nB\n")
        orchestrator.add(a)
        orchestrator.add(b)

        with pytest.raises(GenerationError) as excinfo:
            orchestrator.commit(predictor="flaky")

        assert excinfo.value.spec_path == b
        assert (tmp_dir / "a.txt").read_text() == "A\n"
        assert not (tmp_dir / "b.txt").exists()
        entries = repo.log.entries()
        assert [e.spec_path for e in entries] == [a]
        assert {s.spec_path for s in repo.index.staged()} == {a, b}
        assert repo.get_branch_ref("main") is None
        assert repo.index.last_commit is None

    def test_unknown_predictor(self, orchestrator: Orchestrator, write_file):
        orchestrator.add(write_file("a.gitgen.md", "---\noutput: a.txt\n---\nA\n"))
        with pytest.raises(UnknownPredictorError):
            orchestrator.commit(predictor="nope")

    def test_provider_from_repository_config(self, repo: Repository, resolver, settings, write_file):
        registry = PredictorRegistry.with_builtins()
        registry.register(FailingPredictor())
        repo.set_config_value("provider", "failing")
        orchestrator = Orchestrator(repo, resolver=resolver, registry=registry, settings=settings)
        orchestrator.add(write_file("a.gitgen.md", "---\noutput: a.txt\n---\nA\n"))
        with pytest.raises(GenerationError):
            orchestrator.commit()


class TestStatus:
    def test_classifies_specs(self, orchestrator: Orchestrator, write_file, tmp_dir: Path):
        write_file(".gitgen.md", "---\nname: defaults\n---\n")
        write_file("cascade-only.gitgen.md", "---\nname: nothing\n---\n")
        missing = write_file("missing.gitgen.md", "---\noutput: missing.txt\n---\nM\n")
        untracked = write_file("untracked.gitgen.md", "---\noutput: untracked.txt\n---\nU\n")
        write_file("untracked.txt", "hand written")
        done = write_file("done.gitgen.md", "---\noutput: done.txt\n---\nD\n")
        edited = write_file("edited.gitgen.md", "---\noutput: edited.txt\n---\nE\n")

        orchestrator.add(done)
        orchestrator.add(edited)
        orchestrator.commit()
        _touch_older(tmp_dir / "edited.txt", edited)
        staged = write_file("staged.gitgen.md", "---\noutput: staged.txt\n---\nS\n")
        orchestrator.add(staged)

        report = orchestrator.status()
        by_spec = {entry.spec_path: entry.status for entry in report.specs}
        assert by_spec == {
            done: SpecStatus.UP_TO_DATE,
            edited: SpecStatus.MODIFIED,
            missing: SpecStatus.MISSING,
            staged: SpecStatus.STAGED,
            untracked: SpecStatus.UNTRACKED,
        }
        assert report.branch == "main"
        assert report.head is not None
        assert report.is_clean is False

    def test_unparsable_spec_is_skipped(self, orchestrator: Orchestrator, write_file):
        write_file("bad.gitgen.md", "---\nname: [oops\n---\n")
        assert orchestrator.status().specs == []


class TestHistory:
    @pytest.fixture
    def committed(self, orchestrator: Orchestrator, write_file, tmp_dir: Path) -> Path:
        spec = write_file("a.gitgen.md", "---\noutput: out.txt\n---\nVersion one.\n")
        orchestrator.add(spec)
        orchestrator.commit("first")
        spec.write_text("---\noutput: out.txt\n---\nVersion two.\n")
        orchestrator.add(spec)
        orchestrator.commit("second")
        return spec

    def test_log(self, orchestrator: Orchestrator, committed: Path):
        assert [e.message for e in orchestrator.log()] == ["second", "first"]
        assert [e.message for e in orchestrator.log(committed, limit=1)] == ["second"]

    def test_find_generation_by_entry_hash(self, orchestrator: Orchestrator, committed: Path):
        first = orchestrator.log()[-1]
        assert orchestrator.find_generation(first.hash[:12]) == first

    def test_find_generation_by_content_hash(self, orchestrator: Orchestrator, committed: Path):
        first = orchestrator.log()[-1]
        assert orchestrator.find_generation(first.content_hash) == first

    def test_ambiguous_prefix(self, orchestrator: Orchestrator, committed: Path):
        with pytest.raises(AmbiguousHashError):
            orchestrator.find_generation("")

    def test_not_found(self, orchestrator: Orchestrator, committed: Path):
        with pytest.raises(GenerationNotFoundError):
            orchestrator.find_generation("zzzz")

    def test_show(self, orchestrator: Orchestrator, committed: Path):
        first = orchestrator.log()[-1]
        entry, content = orchestrator.show(first.hash[:12])
        assert entry == first
        assert content == "Version one.\n"

    def test_soft_reset_writes_nothing(self, orchestrator: Orchestrator, committed: Path, tmp_dir: Path):
        first = orchestrator.log()[-1]
        result = orchestrator.reset(first.hash[:12])
        assert result.written is False
        assert (tmp_dir / "out.txt").read_text() == "Version two.\n"
        assert len(orchestrator.repository.log.entries()) == 2

    def test_hard_reset_restores_and_logs(self, orchestrator: Orchestrator, committed: Path, tmp_dir: Path):
        first = orchestrator.log()[-1]
        result = orchestrator.reset(first.hash[:12], hard=True)
        assert result.written is True
        assert (tmp_dir / "out.txt").read_text() == "Version one.\n"

        latest = orchestrator.log()[0]
        assert latest.message == f"Reset to {first.short_hash}"
        assert latest.content_hash == first.content_hash
        assert latest.tokens.total == 0
        # Two entries now carry the same content hash.
        with pytest.raises(AmbiguousHashError):
            orchestrator.find_generation(first.content_hash)
        assert orchestrator.find_generation(latest.hash[:12]) == latest

    def test_cascade(self, orchestrator: Orchestrator, committed: Path):
        assert orchestrator.cascade(committed).body == "Version two."


class TestHashPrefixes:
    @pytest.fixture
    def entries(self, repo: Repository, tmp_dir: Path) -> list[LogEntry]:
        made = [
            LogEntry(
                hash="ab12" + "0" * 60,
                message="one",
                spec_path=tmp_dir / "a.gitgen.md",
                output_path=tmp_dir / "a.txt",
                content_hash="ff" + "0" * 62,
                model="template",
            ),
            LogEntry(
                hash="cd34" + "0" * 60,
                message="two",
                spec_path=tmp_dir / "b.gitgen.md",
                output_path=tmp_dir / "b.txt",
                content_hash="ab99" + "0" * 60,
                model="template",
            ),
        ]
        for entry in made:
            repo.log.append(entry)
        return made

    def test_prefix_matching_both_hash_kinds_is_ambiguous(
        self, orchestrator: Orchestrator, entries: list[LogEntry]
    ):
        with pytest.raises(AmbiguousHashError) as excinfo:
            orchestrator.find_generation("ab")
        assert excinfo.value.count == 2

    def test_longer_prefix_picks_one_entry(
        self, orchestrator: Orchestrator, entries: list[LogEntry]
    ):
        assert orchestrator.find_generation("ab12") == entries[0]
        assert orchestrator.find_generation("ab99") == entries[1]
        assert orchestrator.find_generation("cd") == entries[1]
