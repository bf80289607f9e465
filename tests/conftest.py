"""Shared fixtures for rakedoc tests.

File handling in tests:
- Use tmp_path for any directory or file creation so tests are isolated and cleaned up.
- Create fixture files with rakedoc.io_utils.write_output (UTF-8, parent dirs created).
- Rakefile sources are written as indented triple-quoted strings; the
  ``parse`` fixture dedents them.
"""

from __future__ import annotations

import textwrap

import pytest

from rakedoc import log
from rakedoc.lexer.tokens import Token, TokenKind
from rakedoc.model import TopLevel
from rakedoc.parser import RakeParser
from rakedoc.stats import Stats


@pytest.fixture(autouse=True)
def _quiet_logs():
    """Keep debug output off between tests."""
    log.set_verbose(False)
    yield
    log.set_verbose(False)


@pytest.fixture
def stats() -> Stats:
    return Stats()


@pytest.fixture
def parse(stats: Stats):
    """Factory fixture: dedent a Rakefile source and scan it."""

    def _parse(source: str, file_name: str = "Rakefile") -> TopLevel:
        return RakeParser(file_name, textwrap.dedent(source), stats).scan()

    return _parse


def _tk(kind: str, line: int, column: int, text: str) -> Token:
    return Token(TokenKind(kind), line, column, text)


@pytest.fixture
def tk():
    """Factory fixture that builds expected tokens: tk("symbol", 2, 5, ":default")."""
    return _tk
