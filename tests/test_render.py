"""Tests for rakedoc.render: tree and JSON output."""

from __future__ import annotations

import json

from rich.console import Console

from rakedoc.parser import parse_file
from rakedoc.render import build_tree, to_json

SOURCE = '''\
require "rake/clean"
Hoe.spec "demo" do
end

desc "Run the [unit] suite"
task :test => [:build]

namespace :db do
  task :migrate, [:version]
  namespace :schema do
    multitask :load
  end
end
'''


def _text(tree) -> str:
    console = Console(record=True, width=200)
    console.print(tree)
    return console.export_text()


class TestTree:
    def test_lines(self):
        text = _text(build_tree(parse_file("Rakefile", SOURCE)))
        assert "Rakefile" in text
        assert "require rake/clean" in text
        assert "include Hoe" in text
        assert ":test → build  Run the [unit] suite" in text
        assert "namespace db" in text
        assert ":migrate [version]" in text
        assert "namespace db:schema" in text
        assert ":load (multitask)" in text

    def test_empty_file(self):
        text = _text(build_tree(parse_file("empty.rake", "")))
        assert text.strip() == "empty.rake"


class TestJson:
    def test_document_per_file(self):
        payload = to_json([parse_file("Rakefile", SOURCE), parse_file("b.rake", "task :x\n")])
        data = json.loads(payload)
        assert [doc["file"] for doc in data] == ["Rakefile", "b.rake"]
        assert data[0]["requires"] == ["rake/clean"]

        root = data[0]["namespaces"][0]
        assert root["includes"] == ["Hoe"]
        test = root["tasks"][0]
        assert test["name"] == ":test"
        assert test["full_name"] == "test"
        assert test["comment"] == "Run the [unit] suite"
        assert test["dependencies"] == ["build"]
        assert test["source"] == 'task :test => [:build]\n'

        schema = root["namespaces"][0]["namespaces"][0]
        assert schema["tasks"][0]["full_name"] == "db:schema:load"
        assert schema["tasks"][0]["kind"] == "multitask"
