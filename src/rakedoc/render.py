"""Render a scanned Rakefile as a Rich tree or JSON."""

from __future__ import annotations

import json

from rich.markup import escape
from rich.tree import Tree

from rakedoc.model import Namespace, Task, TopLevel


def _task_label(task: Task) -> str:
    label = f"[bold cyan]{escape(task.name)}[/bold cyan]"
    if task.kind != "task":
        label += f" [magenta]({task.kind})[/magenta]"
    if task.params:
        label += f" [yellow]\\[{escape(', '.join(task.params))}][/yellow]"
    if task.dependencies:
        label += f" → {escape(', '.join(task.dependencies))}"
    if task.comment:
        label += f"  [dim]{escape(task.comment)}[/dim]"
    return label


def _add_namespace(branch: Tree, ns: Namespace) -> None:
    for inc in ns.includes:
        branch.add(f"[green]include[/green] {escape(inc.name)}")
    for task in ns.tasks:
        branch.add(_task_label(task))
    for child in ns.namespaces:
        _add_namespace(branch.add(f"[bold]namespace[/bold] {escape(child.full_name)}"), child)


def build_tree(top_level: TopLevel) -> Tree:
    """Requires first, then every namespace with its includes and tasks."""
    tree = Tree(f"[bold]{escape(top_level.file_name)}[/bold]")
    for req in top_level.requires:
        tree.add(f"[blue]require[/blue] {escape(req.name)}")
    for ns in top_level.namespaces:
        _add_namespace(tree, ns)
    return tree


def to_json(top_levels: list[TopLevel]) -> str:
    return json.dumps([top.to_dict() for top in top_levels], indent=2)
