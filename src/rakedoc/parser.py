"""Rakefile parser: tasks, namespaces, dependencies, builders and requires.

The parser does not understand Ruby. It walks the token stream, recognises a
handful of Rake DSL calls (``desc``, ``task``, ``namespace``, ``require`` and
constant-prefixed task builders) and skips everything else. Block extents
are found by balancing block keywords against ``end``.
"""

from __future__ import annotations

import re
import textwrap
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from rakedoc import log
from rakedoc.lexer import (
    BLOCK_OPENERS,
    Token,
    TokenKind,
    TokenStream,
    literal_name,
    tokenize,
    tokens_to_s,
    unquote,
)
from rakedoc.model import ROOT_NAMESPACE, Include, Namespace, Require, Task, TopLevel
from rakedoc.signals import EndOfDocument, EndOfInput
from rakedoc.stats import Stats

ENDDOC_RE = re.compile(r"^#\s*:enddoc:")

# Token kinds that can name a task or a namespace.
_NAME_KINDS = frozenset({
    TokenKind.SYMBOL,
    TokenKind.STRING,
    TokenKind.LABEL,
    TokenKind.IDENTIFIER,
    TokenKind.CONSTANT,
})

# Tokens left for the body reader after a task signature.
_STATEMENT_ENDS = frozenset({TokenKind.NL, TokenKind.DO, TokenKind.END})


@dataclass
class ParseContext:
    """Traversal state of one scan: current container, block depth, pending desc."""

    container: Namespace
    nest: int = 0
    description: str | None = None

    def use_desc(self) -> str:
        """Consume the pending description (empty string when there is none)."""
        desc, self.description = self.description, None
        return desc or ""

    @contextmanager
    def switch(self, namespace: Namespace) -> Iterator[ParseContext]:
        """Make *namespace* the current container one level deeper, restoring on exit."""
        old_container, old_nest = self.container, self.nest
        self.container = namespace
        self.nest += 1
        try:
            yield self
        finally:
            self.container = old_container
            self.nest = old_nest


class RakeParser:
    """Scans one Rakefile into a :class:`TopLevel`.

    Usage::

        stats = Stats()
        top = RakeParser("Rakefile", source, stats).scan()
        for task in top.each_task():
            print(task.full_name, task.dependencies)
    """

    def __init__(self, file_name: str, content: str, stats: Stats) -> None:
        self.file_name = file_name
        self.content = content
        self.stats = stats
        self.top_level = TopLevel(file_name)
        self.stream = TokenStream(())

    # ── entry point ──────────────────────────────────────────────

    def scan(self) -> TopLevel:
        """Parse the whole file. Never raises for malformed input."""
        self.top_level = TopLevel(self.file_name)
        self.stream = TokenStream(tokenize(self.content))
        self.stats.add_file(self.file_name)

        root = self.top_level.add_namespace(ROOT_NAMESPACE)
        self.stats.add_namespace(root)
        ctx = ParseContext(container=root)

        try:
            self.parse_rakefile(ctx)
        except EndOfDocument:
            log.debug(f"{self.file_name}: documentation stopped by :enddoc:")
        except EndOfInput:
            log.debug(f"{self.file_name}: unexpected end of input")

        self.stats.count_comments(list(self.top_level.each_task()))
        return self.top_level

    # ── dispatch loop ────────────────────────────────────────────

    def parse_rakefile(self, ctx: ParseContext) -> None:
        """Read statements until the input ends or the enclosing namespace block closes."""
        start_nest = ctx.nest
        prev: Token | None = None

        while (tk := self.stream.get_tk()) is not None:
            kind = tk.kind
            if kind == TokenKind.CONSTANT:
                self.parse_task_builder(ctx, tk)
            elif kind in BLOCK_OPENERS:
                ctx.nest += 1
            elif kind == TokenKind.END:
                ctx.nest -= 1
                if start_nest > 0 and ctx.nest <= start_nest:
                    break
            elif kind == TokenKind.IDENTIFIER:
                handler = self._dispatch.get(tk.text)
                called_on_receiver = prev is not None and prev.kind in (TokenKind.DOT, TokenKind.COLON2)
                if handler is not None and not called_on_receiver:
                    handler(self, ctx, tk)
            elif kind == TokenKind.COMMENT and ENDDOC_RE.match(tk.text):
                raise EndOfDocument()

            if kind not in (TokenKind.SPACE, TokenKind.COMMENT):
                prev = tk

    # ── block and argument consumers ─────────────────────────────

    def consume_array(self) -> list[Token]:
        """Read through the closing ``]`` of an array whose ``[`` was just read."""
        return self.stream.read_until(TokenKind.RBRACK)

    def consume_body(self) -> list[Token]:
        """Read one single-line statement or one complete block."""
        seen_nest = False
        nest = 0
        body: list[Token] = []

        while (tk := self.stream.get_tk()) is not None:
            if tk.kind == TokenKind.END and nest == 0:
                # closes the enclosing block, as in `namespace :x do task :y end`
                self.stream.unget_tk(tk)
                break
            body.append(tk)

            if tk.kind in BLOCK_OPENERS:
                nest += 1
                seen_nest = True
            elif tk.kind == TokenKind.END:
                nest -= 1
            elif tk.kind == TokenKind.NL and not seen_nest:
                break

            if nest == 0 and seen_nest:
                break

        return body

    def consume_task_arguments(self, task: Task) -> None:
        """Read the optional ``=> deps`` (and ``, [params]``) after a task name."""
        self.stream.skip_tkspace(False)
        tk = self.stream.get_tk()
        if tk is None:
            return

        if tk.kind == TokenKind.COMMA:
            self.stream.skip_tkspace()
            params = self.stream.get_tk()
            if params is None:
                return
            if params.kind != TokenKind.LBRACK:
                self.stream.unget_tk(params)
                return
            task.params.extend(
                literal_name(t)
                for t in self.consume_array()
                if t.kind in (TokenKind.SYMBOL, TokenKind.STRING)
            )
            self.stream.skip_tkspace(False)
            tk = self.stream.get_tk()
            if tk is None:
                return

        if tk.kind in _STATEMENT_ENDS:
            self.stream.unget_tk(tk)
        elif tk.kind == TokenKind.ASSOC:
            self._consume_dependencies(task)

    def _consume_dependencies(self, task: Task) -> None:
        self.stream.skip_tkspace()
        tk = self.stream.require_tk()

        if tk.kind == TokenKind.LBRACK:
            deps = [literal_name(t) for t in self.consume_array() if t.kind == TokenKind.SYMBOL]
            task.add_dependencies(deps)
        elif tk.kind == TokenKind.SYMBOL:
            task.add_dependencies([literal_name(tk)])
        else:
            log.debug(f"{self.file_name}:{tk.line}: ignoring dependencies {tk.text!r} of {task.name}")
            if tk.kind in _STATEMENT_ENDS:
                self.stream.unget_tk(tk)

    # ── DSL handlers ─────────────────────────────────────────────

    def parse_description(self, ctx: ParseContext, tk: Token) -> None:
        """desc "My cool task" """
        self.stream.skip_tkspace()
        tk = self.stream.require_tk()
        if tk.kind == TokenKind.LPAREN:
            self.stream.skip_tkspace()
            tk = self.stream.require_tk()

        if tk.kind == TokenKind.STRING and tk.text.startswith("<<"):
            run = self.stream.read_until(TokenKind.HEREDOC_BODY)
            ctx.description = _heredoc_text(run[-1]) if run else ""
        else:
            ctx.description = unquote(tk.text)

    def parse_namespace(self, ctx: ParseContext, tk: Token) -> None:
        """namespace :doc do ... end"""
        self.stream.skip_tkspace()
        name_tk = self.stream.require_tk()
        if name_tk.kind == TokenKind.LPAREN:
            self.stream.skip_tkspace()
            name_tk = self.stream.require_tk()
        name = literal_name(name_tk)

        namespace = ctx.container.find_namespace(name)
        if namespace is None:
            namespace = ctx.container.add_namespace(name)
            self.stats.add_namespace(namespace)
        else:
            log.debug(f"{self.file_name}:{tk.line}: reopening namespace {namespace.full_name}")

        self.stream.skip_tkspace()

        with ctx.switch(namespace):
            self.parse_rakefile(ctx)

    def parse_task(self, ctx: ParseContext, tk: Token) -> Task | None:
        """task :name => [:deps] do ... end"""
        with self.stream.capture(tk) as signature:
            self.stream.skip_tkspace(False)
            name_tk = self.stream.require_tk()
            if name_tk.kind == TokenKind.LPAREN:
                name_tk = self.stream.require_tk()
            if name_tk.kind not in _NAME_KINDS:
                self.stream.unget_tk(name_tk)
                return None

            name = name_tk.text
            task = ctx.container.find_task(name)
            created = task is None
            if task is None:
                task = Task(name=name, text=tokens_to_s(signature), kind=tk.text, line=tk.line)
                ctx.container.add_task(task)
                self.stats.add_task(task)
            else:
                log.debug(f"{self.file_name}:{tk.line}: extending task {task.full_name}")

            desc = ctx.use_desc()
            if created:
                task.comment = desc

            if name_tk.kind == TokenKind.LABEL:
                self._consume_dependencies(task)
            else:
                self.consume_task_arguments(task)

        body = self.consume_body()
        if created:
            task.signature = signature
            task.body = body
        return task

    def parse_task_builder(self, ctx: ParseContext, tk: Token) -> None:
        """Hoe.spec 'my_cool_project' do ... end"""
        name = tk.text

        if name == "ENV":
            self.stream.read_until(TokenKind.NL)
            return

        while (nxt := self.stream.get_tk()) is not None:
            if nxt.kind != TokenKind.COLON2:
                self.stream.unget_tk(nxt)
                break
            part = self.stream.get_tk()
            if part is None:
                break
            if part.kind != TokenKind.CONSTANT:
                self.stream.unget_tk(part)
                break
            name = f"{name}::{part.text}"

        run = self.stream.read_until(TokenKind.DO, TokenKind.NL)
        if run and run[-1].kind == TokenKind.DO:
            self.stream.unget_tk(run[-1])
            self.consume_body()

        first = next((t for t in run if t.kind != TokenKind.SPACE), None)
        if first is not None and (first.kind == TokenKind.ASSIGN or first.text in ("||=", "&&=")):
            return

        log.debug(f"{self.file_name}:{tk.line}: builder {name}")
        ctx.container.add_include(Include(name))

    def parse_require(self, ctx: ParseContext, tk: Token) -> None:
        """require 'rake/clean'"""
        self.stream.skip_tkspace(False)
        nxt = self.stream.get_tk()
        if nxt is None:
            return

        if nxt.kind == TokenKind.STRING:
            name = unquote(nxt.text)
            log.debug(f"{self.file_name}:{tk.line}: require {name}")
            self.top_level.add_require(Require(name))
        else:
            self.stream.unget_tk(nxt)

    _dispatch: dict[str, Callable[[RakeParser, ParseContext, Token], object]] = {
        "desc": parse_description,
        "task": parse_task,
        "multitask": parse_task,
        "file": parse_task,
        "namespace": parse_namespace,
        "require": parse_require,
        "require_relative": parse_require,
    }


def _heredoc_text(tk: Token) -> str:
    """Body of a heredoc without its terminator line, dedented."""
    if tk.kind != TokenKind.HEREDOC_BODY:
        return ""
    lines = tk.text.split("\n")
    if len(lines) > 1:
        lines = lines[:-1]
    return textwrap.dedent("\n".join(lines)).strip()


def parse_file(file_name: str, content: str, stats: Stats | None = None) -> TopLevel:
    """Scan *content* as the Rakefile *file_name*."""
    return RakeParser(file_name, content, stats if stats is not None else Stats()).scan()
