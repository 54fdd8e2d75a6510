# tests/test_cli.py
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from codectx.cli import get_default_output_name, main, parse_paths


@pytest.fixture
def project(tmp_path, monkeypatch):
    """
    A small project with code, logs and a vendored directory.
    The tests run from inside it, as the CLI scans relative to the cwd.
    """
    (tmp_path / "cmd").mkdir()
    (tmp_path / "cmd" / "main.go").write_text("package main\n\nfunc main() {}", encoding="utf-8")
    (tmp_path / "pkg" / "vendor").mkdir(parents=True)
    (tmp_path / "pkg" / "util.go").write_text("package pkg", encoding="utf-8")
    (tmp_path / "pkg" / "vendor" / "dep.go").write_text("package dep", encoding="utf-8")
    (tmp_path / "logs").mkdir()
    (tmp_path / "logs" / "app.log").write_text("ERROR: ...", encoding="utf-8")
    (tmp_path / "README.md").write_text("# My Project", encoding="utf-8")

    monkeypatch.chdir(tmp_path)
    return tmp_path


def run_cli(*args):
    with patch.object(sys, "argv", ["codectx", *args]):
        main()


def test_get_default_output_name():
    assert get_default_output_name(Path("/work/my project")) == "my_project_context.txt"
    assert get_default_output_name(Path("/")) == "project_context.txt"


def test_parse_paths():
    assert parse_paths("cmd, pkg") == ["cmd", "pkg"]
    assert parse_paths("") == ["."]


def test_end_to_end_run(project, capsys):
    run_cli("-i", r"\.go$", "-x", "vendor/", "-p", "./cmd,./pkg", "--no-gitignore", "-o", "out.txt", "-y")

    output_file = project / "out.txt"
    assert output_file.exists()
    content = output_file.read_text(encoding="utf-8")

    assert content.startswith("Context:\n\n## File tree\n\n")
    assert "./cmd/main.go\n```go\npackage main" in content
    assert "./pkg/util.go\n```go\n" in content

    assert "dep.go" not in content
    assert "README.md" not in content
    assert "app.log" not in content

    out = capsys.readouterr().out
    assert "The following files will be used as context:" in out
    assert "Total files: 2" in out


def test_ignore_file_and_default_output(project):
    (project / ".ctxignore").write_text("logs/\nvendor/\n", encoding="utf-8")

    run_cli("--ignore-file", ".ctxignore", "--no-gitignore", "-y")

    output_file = project / f"{project.name}_context.txt"
    content = output_file.read_text(encoding="utf-8")
    assert "./README.md\n```md\n# My Project" in content
    assert "./.ctxignore" in content
    assert "app.log" not in content
    assert "dep.go" not in content

    # A second run must not pick up the first run's output
    run_cli("--ignore-file", ".ctxignore", "--no-gitignore", "-y")
    content = output_file.read_text(encoding="utf-8")
    assert f"./{output_file.name}" not in content


def test_declining_confirmation_writes_nothing(project, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda _: "n")

    run_cli("--no-gitignore", "-o", "out.txt")

    assert not (project / "out.txt").exists()
    assert "See ya later!" in capsys.readouterr().out


def test_no_matching_files(project, capsys):
    run_cli("-i", r"\.rs$", "--no-gitignore", "-o", "out.txt", "-y")

    assert not (project / "out.txt").exists()
    assert "No files found matching the given criteria." in capsys.readouterr().out


def test_invalid_pattern_exits(project, capsys):
    with pytest.raises(SystemExit) as excinfo:
        run_cli("-x", "(", "--no-gitignore", "-y")

    assert excinfo.value.code == 1
    assert "Error: invalid pattern" in capsys.readouterr().err


def test_missing_path_exits(project, capsys):
    with pytest.raises(SystemExit) as excinfo:
        run_cli("-p", "nowhere", "--no-gitignore", "-y")

    assert excinfo.value.code == 1
    assert "nowhere" in capsys.readouterr().err


def test_large_file_warning(project, capsys):
    (project / "big.txt").write_text("x" * 100001, encoding="utf-8")

    run_cli("-i", r"big\.txt$", "--no-gitignore", "-o", "out.txt", "-y")

    err = capsys.readouterr().err
    assert "Warning: big.txt is very large (100001 bytes)" in err
