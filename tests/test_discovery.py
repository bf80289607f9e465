"""Tests for rakedoc.discovery: which files are treated as Rake files."""

from __future__ import annotations

from pathlib import Path

import pytest

from rakedoc.discovery import can_parse, find_rakefiles
from rakedoc.io_utils import write_output


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Rakefile", True),
        ("rakefile", True),
        ("Rakefile.rb", True),
        ("db.rake", True),
        ("Rakefile.bak", False),
        ("rake.rb", False),
        ("Gemfile", False),
    ],
)
def test_can_parse(name, expected):
    assert can_parse(name) is expected


def test_can_parse_extra_pattern():
    assert can_parse("tasks/build.thor", [r"\.thor$"])
    assert not can_parse("tasks/build.thor")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    write_output(tmp_path / "Rakefile", "task :default\n")
    write_output(tmp_path / "lib" / "tasks" / "db.rake", "task :migrate\n")
    write_output(tmp_path / "lib" / "tasks" / "README.md", "notes\n")
    write_output(tmp_path / "vendor" / "bundle" / "gem.rake", "task :vendored\n")
    write_output(tmp_path / ".git" / "hooks.rake", "task :hidden\n")
    return tmp_path


def test_walks_directories(project):
    found = find_rakefiles([project])
    assert found == [project / "Rakefile", project / "lib" / "tasks" / "db.rake"]


def test_explicit_files_and_duplicates(project):
    rakefile = project / "Rakefile"
    found = find_rakefiles([rakefile, project, str(rakefile)])
    assert found.count(rakefile) == 1
    assert len(found) == 2


def test_non_matching_file_is_skipped(project, capsys):
    found = find_rakefiles([project / "lib" / "tasks" / "README.md"])
    assert found == []
    assert "Not a Rake file" in capsys.readouterr().err


def test_missing_path_is_reported(tmp_path, capsys):
    assert find_rakefiles([tmp_path / "nope"]) == []
    assert "No such file or directory" in capsys.readouterr().err


def test_extra_patterns(project):
    write_output(project / "build.thor", "task :thor\n")
    found = find_rakefiles([project], [r"\.thor$"])
    assert found == [project / "build.thor"]
