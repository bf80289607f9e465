"""Documentation object model for Rakefiles: namespaces, tasks, includes, requires.

Everything here is append-only: entities are added and extended while a file
is scanned, never removed or rewritten.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from rakedoc.lexer.tokens import Token, tokens_to_s, unquote

ROOT_NAMESPACE = "Rake Tasks"


def task_key(name: str) -> str:
    """Bare task name: ``:default``, ``"default"`` and ``default:`` all give ``default``."""
    if name.startswith(":"):
        name = name[1:]
    elif name.endswith(":"):
        name = name[:-1]
    return unquote(name)


@dataclass
class Require:
    name: str


@dataclass
class Include:
    """A task builder (``Hoe.spec``, ``Rake::TestTask.new``) configuring a namespace."""

    name: str


@dataclass(eq=False)
class Task:
    name: str
    text: str = ""
    comment: str = ""
    kind: str = "task"
    line: int = 0
    dependencies: list[str] = field(default_factory=list)
    params: list[str] = field(default_factory=list)
    signature: list[Token] = field(default_factory=list, repr=False)
    body: list[Token] = field(default_factory=list, repr=False)
    parent: Namespace | None = field(default=None, repr=False)

    @property
    def key(self) -> str:
        return task_key(self.name)

    @property
    def full_name(self) -> str:
        if self.parent is None or self.parent.parent is None:
            return self.key
        return f"{self.parent.full_name}:{self.key}"

    @property
    def token_stream(self) -> list[Token]:
        """Signature followed by body, as read from the source."""
        return [*self.signature, *self.body]

    def add_dependencies(self, names: list[str]) -> None:
        self.dependencies.extend(names)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "full_name": self.full_name,
            "kind": self.kind,
            "line": self.line,
            "comment": self.comment,
            "text": self.text,
            "dependencies": list(self.dependencies),
            "params": list(self.params),
            "source": tokens_to_s(self.token_stream),
        }


@dataclass(eq=False)
class Namespace:
    name: str
    parent: Namespace | None = field(default=None, repr=False)
    namespaces: list[Namespace] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    includes: list[Include] = field(default_factory=list)
    _task_index: dict[str, Task] = field(default_factory=dict, init=False, repr=False)

    @property
    def full_name(self) -> str:
        """Colon-joined names below the root, as Rake addresses namespaces."""
        if self.parent is None:
            return ""
        outer = self.parent.full_name
        return f"{outer}:{self.name}" if outer else self.name

    # ── lookup ───────────────────────────────────────────────────

    def find_task(self, name: str) -> Task | None:
        """Look *name* up in any of its spellings (symbol, string, label or bare)."""
        return self._task_index.get(task_key(name))

    def find_namespace(self, name: str) -> Namespace | None:
        for ns in self.namespaces:
            if ns.name == name:
                return ns
        return None

    # ── mutation ─────────────────────────────────────────────────

    def add_namespace(self, name: str) -> Namespace:
        """Return the child namespace *name*, creating it on first use."""
        ns = self.find_namespace(name)
        if ns is None:
            ns = Namespace(name=name, parent=self)
            self.namespaces.append(ns)
        return ns

    def add_task(self, task: Task) -> Task:
        if task.key in self._task_index:
            raise ValueError(f"Task {task.name!r} already defined in {self.name!r}")
        task.parent = self
        self.tasks.append(task)
        self._task_index[task.key] = task
        return task

    def add_include(self, include: Include) -> Include:
        self.includes.append(include)
        return include

    # ── traversal ────────────────────────────────────────────────

    def each_task(self) -> Iterator[Task]:
        """Depth-first walk: own tasks, then each child namespace."""
        yield from self.tasks
        for ns in self.namespaces:
            yield from ns.each_task()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "full_name": self.full_name,
            "includes": [inc.name for inc in self.includes],
            "tasks": [task.to_dict() for task in self.tasks],
            "namespaces": [ns.to_dict() for ns in self.namespaces],
        }


@dataclass(eq=False)
class TopLevel:
    """Document root for one scanned file."""

    file_name: str
    requires: list[Require] = field(default_factory=list)
    namespaces: list[Namespace] = field(default_factory=list)

    @property
    def root(self) -> Namespace | None:
        return self.namespaces[0] if self.namespaces else None

    def add_namespace(self, name: str) -> Namespace:
        ns = Namespace(name=name)
        self.namespaces.append(ns)
        return ns

    def add_require(self, require: Require) -> Require:
        self.requires.append(require)
        return require

    def each_task(self) -> Iterator[Task]:
        for ns in self.namespaces:
            yield from ns.each_task()

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file_name,
            "requires": [req.name for req in self.requires],
            "namespaces": [ns.to_dict() for ns in self.namespaces],
        }
