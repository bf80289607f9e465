"""Statistics collected while scanning Rakefiles."""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.table import Table

from rakedoc import log
from rakedoc.model import Namespace, Task


@dataclass
class Stats:
    """Counts what the parser reported.

    The parser only ever appends: one call per file, namespace and task
    created. Tasks merged into an existing definition are not reported again.
    """

    files: list[str] = field(default_factory=list)
    num_namespaces: int = 0
    num_tasks: int = 0
    num_commented: int = 0

    def add_file(self, file_name: str) -> None:
        self.files.append(file_name)
        log.debug(f"Parsing {file_name}")

    def add_namespace(self, namespace: Namespace) -> None:
        self.num_namespaces += 1
        log.debug(f"Namespace: {namespace.full_name or namespace.name}")

    def add_task(self, task: Task) -> None:
        self.num_tasks += 1
        log.debug(f"Task: {task.name} (line {task.line})")

    def count_comments(self, tasks: list[Task]) -> None:
        """Record how many of *tasks* ended up with a description."""
        self.num_commented += sum(1 for t in tasks if t.comment)

    @property
    def num_files(self) -> int:
        return len(self.files)

    @property
    def percent_documented(self) -> float:
        if not self.num_tasks:
            return 100.0
        return 100.0 * self.num_commented / self.num_tasks

    def summary_table(self) -> Table:
        table = Table(title="Rake documentation summary", show_header=True)
        table.add_column("Item")
        table.add_column("Count", justify="right")
        table.add_row("Files", str(self.num_files))
        table.add_row("Namespaces", str(self.num_namespaces))
        table.add_row("Tasks", str(self.num_tasks))
        table.add_row("Documented", f"{self.num_commented} ({self.percent_documented:.1f}%)")
        return table

    def report(self) -> None:
        log.console.print(self.summary_table())
