"""Tests for rakedoc.stats.Stats."""

from __future__ import annotations

from rich.console import Console

from rakedoc.model import Namespace, Task
from rakedoc.stats import Stats


def _render(stats: Stats) -> str:
    console = Console(record=True, width=120)
    console.print(stats.summary_table())
    return console.export_text()


def test_counters():
    stats = Stats()
    stats.add_file("Rakefile")
    stats.add_namespace(Namespace(name="Rake Tasks"))
    stats.add_task(Task(name="a"))
    stats.add_task(Task(name="b"))
    assert stats.num_files == 1
    assert stats.num_namespaces == 1
    assert stats.num_tasks == 2


def test_count_comments():
    stats = Stats()
    stats.num_tasks = 4
    stats.count_comments([Task(name="a", comment="x"), Task(name="b"), Task(name="c", comment="y")])
    assert stats.num_commented == 2
    assert stats.percent_documented == 50.0


def test_percent_without_tasks():
    assert Stats().percent_documented == 100.0


def test_summary_table():
    stats = Stats(files=["Rakefile", "lib/tasks/db.rake"], num_namespaces=3, num_tasks=4, num_commented=1)
    text = _render(stats)
    assert "Rake documentation summary" in text
    assert "Files" in text
    assert "1 (25.0%)" in text


def test_verbose_reporting_goes_to_stderr(capsys):
    from rakedoc import log

    log.set_verbose(True)
    Stats().add_file("Rakefile")
    captured = capsys.readouterr()
    assert "Parsing Rakefile" in captured.err
    assert captured.out == ""
