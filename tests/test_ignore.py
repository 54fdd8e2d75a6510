# tests/test_ignore.py
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from codectx.core import matchers as matchers_module
from codectx.core.fs import MemoryFileSystem
from codectx.core.ignore import build_exclude_matcher, build_include_matcher, load_ignore_spec
from codectx.core.matchers import GitignoreMatcher, PathSpecMatcher, RegexMatcher
from codectx.core.scanner import gather_files
from codectx.errors import FilesystemError, InvalidPatternError
from codectx.models import FileGatherOptions


@pytest.fixture
def no_git(monkeypatch):
    monkeypatch.setattr(matchers_module.shutil, "which", lambda name: None)


@pytest.fixture
def fake_git(monkeypatch):
    monkeypatch.setattr(matchers_module.shutil, "which", lambda name: "/usr/bin/git")


def test_load_ignore_spec_with_extra_patterns(tmp_path):
    ignore_file = tmp_path / ".ctxignore"
    ignore_file.write_text("# comment\nnode_modules/\n*.log\n!keep.log\n", encoding="utf-8")

    spec = load_ignore_spec(ignore_file, extra_patterns=["out_context.txt"])

    assert spec.matches("node_modules/pkg/index.js")
    assert spec.matches("app.log")
    assert not spec.matches("keep.log")
    assert spec.matches("out_context.txt")
    assert not spec.matches("src/main.py")


def test_load_ignore_spec_missing_file(tmp_path):
    with pytest.raises(FilesystemError) as excinfo:
        load_ignore_spec(tmp_path / "missing")
    assert excinfo.value.path.endswith("missing")


def test_build_include_matcher_defaults_to_everything():
    matcher = build_include_matcher()
    assert matcher.matches("any/path.txt")
    assert matcher.matches("")


def test_build_exclude_matcher_order(fake_git):
    matcher = build_exclude_matcher("vendor/", extra_patterns=["*.tmp"])
    kinds = [type(m) for m in matcher.matchers]
    assert kinds == [RegexMatcher, RegexMatcher, PathSpecMatcher, GitignoreMatcher]


def test_build_exclude_matcher_all_disabled():
    matcher = build_exclude_matcher(exclude_from_gitignore=False, exclude_git_dir=False)
    assert len(matcher) == 0
    assert not matcher.matches(".git")


def test_build_exclude_matcher_invalid_pattern_is_fatal(no_git):
    with pytest.raises(InvalidPatternError):
        build_exclude_matcher("(")


def test_missing_git_degrades_to_warning(no_git, caplog):
    with caplog.at_level(logging.WARNING):
        matcher = build_exclude_matcher("vendor/")

    assert [type(m) for m in matcher.matchers] == [RegexMatcher, RegexMatcher]
    assert "git not found in PATH, skipping .gitignore" in caplog.text
    warnings = [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert len(warnings) == 1


def test_gather_proceeds_without_git(no_git, caplog):
    fs = MemoryFileSystem({
        "cmd/main.go": "package main",
        "pkg/vendor/dep.go": "package dep",
        ".git/HEAD": "ref: refs/heads/main",
    })
    with caplog.at_level(logging.WARNING):
        exclude = build_exclude_matcher("vendor/")
        files, _ = gather_files(FileGatherOptions(
            include_matcher=build_include_matcher(r".*\.go$"),
            exclude_matcher=exclude,
            fs=fs,
        ))

    assert [f.path for f in files] == ["cmd/main.go"]
    assert "skipping .gitignore" in caplog.text
