"""Contract tests for the documentation model (rakedoc.model)."""

from __future__ import annotations

import pytest

from rakedoc.model import ROOT_NAMESPACE, Include, Namespace, Require, Task, TopLevel


def _tree() -> TopLevel:
    top = TopLevel("Rakefile")
    root = top.add_namespace(ROOT_NAMESPACE)
    root.add_task(Task(name="default", dependencies=["test"]))
    db = root.add_namespace("db")
    db.add_task(Task(name="migrate", comment="Run migrations"))
    db.add_namespace("schema").add_task(Task(name="load"))
    root.add_task(Task(name="test"))
    return top


class TestNames:
    """Colon-joined names below the root namespace."""

    def test_root_task_has_bare_name(self):
        top = _tree()
        assert top.root.find_task("default").full_name == "default"

    def test_nested_full_names(self):
        top = _tree()
        db = top.root.find_namespace("db")
        schema = db.find_namespace("schema")
        assert db.full_name == "db"
        assert schema.full_name == "db:schema"
        assert schema.find_task("load").full_name == "db:schema:load"

    def test_root_full_name_is_empty(self):
        assert _tree().root.full_name == ""

    def test_detached_task(self):
        assert Task(name="orphan").full_name == "orphan"

    def test_written_name_is_kept(self):
        ns = Namespace(name="db", parent=Namespace(name=ROOT_NAMESPACE))
        task = ns.add_task(Task(name=":migrate"))
        assert task.name == ":migrate"
        assert task.full_name == "db:migrate"

    @pytest.mark.parametrize("spelling", [":migrate", '"migrate"', ":\"migrate\"", "migrate:", "migrate"])
    def test_lookup_ignores_spelling(self, spelling):
        ns = Namespace(name="db")
        task = ns.add_task(Task(name=":migrate"))
        assert ns.find_task(spelling) is task

    def test_duplicate_spelling_rejected(self):
        ns = Namespace(name="db")
        ns.add_task(Task(name=":migrate"))
        with pytest.raises(ValueError, match="already defined"):
            ns.add_task(Task(name='"migrate"'))


class TestMutation:
    """Namespaces are append-only containers."""

    def test_add_task_sets_parent(self):
        ns = Namespace(name="ns")
        task = ns.add_task(Task(name="a"))
        assert task.parent is ns
        assert ns.find_task("a") is task

    def test_duplicate_task_rejected(self):
        ns = Namespace(name="ns")
        ns.add_task(Task(name="a"))
        with pytest.raises(ValueError, match="already defined"):
            ns.add_task(Task(name="a"))

    def test_add_namespace_reuses_child(self):
        ns = Namespace(name="ns")
        first = ns.add_namespace("child")
        assert ns.add_namespace("child") is first
        assert len(ns.namespaces) == 1

    def test_add_dependencies_appends(self):
        task = Task(name="a", dependencies=["b"])
        task.add_dependencies(["c", "b"])
        assert task.dependencies == ["b", "c", "b"]

    def test_includes_and_requires(self):
        top = TopLevel("Rakefile")
        ns = top.add_namespace(ROOT_NAMESPACE)
        ns.add_include(Include("Hoe"))
        top.add_require(Require("rake/clean"))
        assert [i.name for i in ns.includes] == ["Hoe"]
        assert [r.name for r in top.requires] == ["rake/clean"]

    def test_empty_top_level_has_no_root(self):
        assert TopLevel("Rakefile").root is None


class TestTraversal:
    def test_each_task_is_depth_first(self):
        names = [t.full_name for t in _tree().each_task()]
        assert names == ["default", "test", "db:migrate", "db:schema:load"]

    def test_to_dict(self):
        data = _tree().to_dict()
        assert data["file"] == "Rakefile"
        assert data["requires"] == []
        root = data["namespaces"][0]
        assert root["name"] == ROOT_NAMESPACE
        assert [t["name"] for t in root["tasks"]] == ["default", "test"]
        assert root["tasks"][0]["dependencies"] == ["test"]
        db = root["namespaces"][0]
        assert db["full_name"] == "db"
        assert db["tasks"][0]["comment"] == "Run migrations"
        assert db["namespaces"][0]["tasks"][0]["full_name"] == "db:schema:load"

    def test_task_dict_keys(self):
        data = Task(name="a").to_dict()
        assert set(data) == {
            "name", "full_name", "kind", "line", "comment", "text",
            "dependencies", "params", "source",
        }
        assert data["source"] == ""
