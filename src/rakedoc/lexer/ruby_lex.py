"""Ruby tokens for the Rake parser, built on the Pygments Ruby lexer.

Pygments reports a string literal as several pieces, splits ``=>`` into
``=`` and ``>`` and emits heredoc bodies after the line that opens them.
:class:`RubyLexer` regroups that output into one :class:`Token` per literal,
joins the operators the parser looks at, and tells block keywords apart from
statement modifiers (``x if y``) and loop conditions (``while x do``).
Concatenating the text of every token gives back the source up to an
``__END__`` marker.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from typing import Any, Iterator

from pygments.lexers.ruby import RubyLexer as PygmentsRubyLexer
from pygments.token import Comment, Error, Keyword, Name, Number, Operator, Punctuation, String, Text

from rakedoc.lexer.tokens import (
    BLOCK_KEYWORDS,
    MODIFIERS,
    OTHER_KEYWORDS,
    VALUE_KEYWORDS,
    Token,
    TokenKind,
)

_Raw = tuple[int, Any, str]

_LINE_SPLIT_RE = re.compile(r"\r?\n|(?:(?!\r?\n).)+")

# Operators Pygments reports as several adjacent tokens, longest first.
_JOINED_OPERATORS: tuple[tuple[str, ...], ...] = (
    ("<", "=", ">"),
    ("=", ">"),
    ("<", "="),
    (">", "="),
    ("-", ">"),
    ("||", "="),
    ("&&", "="),
    ("<<", "="),
    (">>", "="),
    ("**", "="),
    ("&", "."),
)

_OPERATOR_KINDS: dict[str, TokenKind] = {
    "=>": TokenKind.ASSOC,
    "=": TokenKind.ASSIGN,
    ">": TokenKind.GT,
    "[": TokenKind.LBRACK,
    "]": TokenKind.RBRACK,
    "::": TokenKind.COLON2,
    ".": TokenKind.DOT,
    "&.": TokenKind.DOT,
}

_PUNCTUATION_KINDS: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
}

# Kinds after which an expression is complete.
_VALUE_KINDS = frozenset({
    TokenKind.IDENTIFIER,
    TokenKind.CONSTANT,
    TokenKind.SYMBOL,
    TokenKind.STRING,
    TokenKind.REGEXP,
    TokenKind.NUMBER,
    TokenKind.IVAR,
    TokenKind.GVAR,
    TokenKind.RPAREN,
    TokenKind.RBRACK,
    TokenKind.RBRACE,
    TokenKind.END,
})


def _raw_tokens(source: str) -> Iterator[_Raw]:
    """Pygments tokens as a gapless, non-overlapping cover of *source*.

    An unterminated heredoc makes Pygments report its lines and then lex them
    a second time; text already covered is dropped.
    """
    pos = 0
    for offset, ttype, value in PygmentsRubyLexer().get_tokens_unprocessed(source):
        if not value:
            continue
        end = offset + len(value)
        if end <= pos:
            continue
        if offset < pos:
            value = value[pos - offset:]
            offset = pos
        elif offset > pos:
            yield pos, Error, source[pos:offset]
        if ttype in Comment.Preproc and value.startswith("__END__"):
            return
        yield offset, ttype, value
        pos = end


def _is_heredoc_line(ttype: Any, value: str) -> bool:
    return value.endswith("\n") and (
        ttype in String.Heredoc or ttype in String.Delimiter or ttype in Error
    )


def _is_heredoc_opener_part(ttype: Any, value: str) -> bool:
    return not value.endswith("\n") and (ttype in String.Heredoc or ttype in String.Delimiter)


def _continues_literal(ttype: Any) -> bool:
    return ttype in String and ttype not in String.Heredoc and ttype not in String.Delimiter


class RubyLexer:
    """Pull tokens out of Ruby source with :meth:`tokens`."""

    def __init__(self, source: str) -> None:
        self._src = source
        self._raw: list[_Raw] = []
        self._i = 0
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]
        self._last: Token | None = None
        self._loop_cond = False

    def tokens(self) -> Iterator[Token]:
        if not self._src:
            return
        self._raw = list(_raw_tokens(self._src))
        self._i = 0
        while self._i < len(self._raw):
            yield from self._next_tokens()

    # ── helpers ──────────────────────────────────────────────────

    def _emit(self, kind: TokenKind, offset: int, text: str) -> Token:
        line = bisect_right(self._line_starts, offset)
        tk = Token(kind, line, offset - self._line_starts[line - 1], text)
        if kind in (TokenKind.NL, TokenKind.SEMICOLON):
            self._loop_cond = False
        if kind not in (TokenKind.SPACE, TokenKind.COMMENT, TokenKind.HEREDOC_BODY):
            self._last = tk
        return tk

    def _peek(self, ahead: int = 1) -> _Raw | None:
        i = self._i + ahead
        return self._raw[i] if i < len(self._raw) else None

    def _ends_value(self) -> bool:
        last = self._last
        if last is None:
            return False
        if last.kind == TokenKind.KEYWORD:
            return last.text in VALUE_KEYWORDS
        return last.kind in _VALUE_KINDS

    # ── grouping ─────────────────────────────────────────────────

    def _next_tokens(self) -> Iterator[Token]:
        offset, ttype, value = self._raw[self._i]

        if ttype in Text:
            self._i += 1
            for m in _LINE_SPLIT_RE.finditer(value):
                kind = TokenKind.NL if m.group().endswith("\n") else TokenKind.SPACE
                yield self._emit(kind, offset + m.start(), m.group())
        elif ttype in Comment:
            self._i += 1
            yield self._emit(TokenKind.COMMENT, offset, value)
        elif _is_heredoc_line(ttype, value):
            yield from self._heredoc_body()
        elif ttype in Operator and value.startswith("<<") and self._opens_heredoc():
            yield self._heredoc_opener()
        elif ttype in String:
            yield self._literal()
        elif ttype in Number:
            self._i += 1
            yield self._emit(TokenKind.NUMBER, offset, value)
        elif ttype in Name or ttype in Keyword or ttype in Operator.Word:
            yield self._word()
        elif ttype in Operator:
            yield self._operator()
        elif ttype in Punctuation:
            self._i += 1
            yield self._emit(_PUNCTUATION_KINDS.get(value, TokenKind.OP), offset, value)
        else:
            self._i += 1
            yield self._emit(TokenKind.OP, offset, value)

    def _literal(self) -> Token:
        """One string, symbol or regexp literal, interpolations included."""
        offset, ttype, value = self._raw[self._i]
        if ttype in String.Symbol and not value.startswith(":"):
            return self._label()

        if ttype in String.Symbol:
            kind = TokenKind.SYMBOL
            if value != ':"':
                self._i += 1
                return self._emit(kind, offset, value)
        elif ttype in String.Regex:
            kind = TokenKind.REGEXP
        else:
            kind = TokenKind.STRING

        parts: list[str] = []
        depth = 0
        while self._i < len(self._raw):
            _, ttype, value = self._raw[self._i]
            if parts and depth == 0 and not _continues_literal(ttype):
                break
            if ttype in String.Interpol:
                if value.endswith("{"):
                    depth += 1
                elif value == "}":
                    depth -= 1
            parts.append(value)
            self._i += 1
        return self._emit(kind, offset, "".join(parts))

    def _label(self) -> Token:
        """``name:`` hash keys, reported by Pygments as a word and a colon."""
        offset, _, value = self._raw[self._i]
        nxt = self._peek()
        if nxt is not None and nxt[1] in Punctuation and nxt[2] == ":":
            self._i += 2
            return self._emit(TokenKind.LABEL, offset, value + ":")
        self._i += 1
        return self._emit(TokenKind.SYMBOL, offset, value)

    def _word(self) -> Token:
        offset, ttype, word = self._raw[self._i]
        nxt = self._peek()
        if nxt is not None and nxt[1] in Punctuation and nxt[2] == ":" and ttype not in Name.Variable:
            return self._label()
        self._i += 1

        if ttype in Name.Variable.Global:
            return self._emit(TokenKind.GVAR, offset, word)
        if ttype in Name.Variable:
            return self._emit(TokenKind.IVAR, offset, word)

        after_dot = self._last is not None and self._last.kind == TokenKind.DOT
        if after_dot or ttype in Name.Function:
            kind = TokenKind.CONSTANT if after_dot and word[0].isupper() else TokenKind.IDENTIFIER
            return self._emit(kind, offset, word)

        kind = BLOCK_KEYWORDS.get(word)
        if kind is not None:
            if kind in MODIFIERS and self._ends_value():
                kind = MODIFIERS[kind]
            elif kind == TokenKind.DO and self._loop_cond:
                self._loop_cond = False
                kind = TokenKind.KEYWORD
            elif kind in (TokenKind.WHILE, TokenKind.UNTIL, TokenKind.FOR):
                self._loop_cond = True
            return self._emit(kind, offset, word)

        if word in OTHER_KEYWORDS:
            return self._emit(TokenKind.KEYWORD, offset, word)
        if word[0].isupper():
            return self._emit(TokenKind.CONSTANT, offset, word)
        return self._emit(TokenKind.IDENTIFIER, offset, word)

    def _operator(self) -> Token:
        offset = self._raw[self._i][0]
        for parts in _JOINED_OPERATORS:
            found = [self._peek(k) for k in range(len(parts))]
            if all(r is not None and r[1] in Operator and r[2] == p for r, p in zip(found, parts)):
                self._i += len(parts)
                text = "".join(parts)
                return self._emit(_OPERATOR_KINDS.get(text, TokenKind.OP), offset, text)
        value = self._raw[self._i][2]
        self._i += 1
        return self._emit(_OPERATOR_KINDS.get(value, TokenKind.OP), offset, value)

    # ── heredocs ─────────────────────────────────────────────────

    def _opens_heredoc(self) -> bool:
        nxt = self._peek()
        return nxt is not None and _is_heredoc_opener_part(nxt[1], nxt[2])

    def _heredoc_opener(self) -> Token:
        offset, _, value = self._raw[self._i]
        parts = [value]
        self._i += 1
        while (nxt := self._peek(0)) is not None and _is_heredoc_opener_part(nxt[1], nxt[2]):
            parts.append(nxt[2])
            self._i += 1
        return self._emit(TokenKind.STRING, offset, "".join(parts))

    def _heredoc_body(self) -> Iterator[Token]:
        """Body lines through the terminator, then the terminator's line break."""
        offset = self._raw[self._i][0]
        parts: list[str] = []
        while (nxt := self._peek(0)) is not None and _is_heredoc_line(nxt[1], nxt[2]):
            parts.append(nxt[2])
            self._i += 1
        text = "".join(parts)
        newline = "\r\n" if text.endswith("\r\n") else "\n"
        body = text[:-len(newline)]
        if body:
            yield self._emit(TokenKind.HEREDOC_BODY, offset, body)
        yield self._emit(TokenKind.NL, offset + len(body), newline)


def tokenize(source: str) -> Iterator[Token]:
    """Yield the tokens of *source*."""
    return RubyLexer(source).tokens()
