"""Token kinds and the Token record produced by the Ruby tokenizer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class TokenKind(str, Enum):
    SPACE = "space"
    NL = "nl"
    COMMENT = "comment"

    IDENTIFIER = "identifier"
    CONSTANT = "constant"
    LABEL = "label"
    SYMBOL = "symbol"
    STRING = "string"
    HEREDOC_BODY = "heredoc_body"
    REGEXP = "regexp"
    NUMBER = "number"
    IVAR = "ivar"
    GVAR = "gvar"

    ASSIGN = "assign"
    ASSOC = "assoc"
    GT = "gt"
    OP = "op"
    LPAREN = "lparen"
    RPAREN = "rparen"
    LBRACK = "lbrack"
    RBRACK = "rbrack"
    LBRACE = "lbrace"
    RBRACE = "rbrace"
    COMMA = "comma"
    DOT = "dot"
    COLON2 = "colon2"
    SEMICOLON = "semicolon"

    # Block structure
    DO = "do"
    END = "end"
    CLASS = "class"
    MODULE = "module"
    DEF = "def"
    BEGIN = "begin"
    IF = "if"
    UNLESS = "unless"
    CASE = "case"
    WHILE = "while"
    UNTIL = "until"
    FOR = "for"

    # Statement modifiers (``x if y``), never open a block
    IF_MOD = "if_mod"
    UNLESS_MOD = "unless_mod"
    WHILE_MOD = "while_mod"
    UNTIL_MOD = "until_mod"

    KEYWORD = "keyword"


# Kinds that open a block closed by ``end``.
BLOCK_OPENERS = frozenset({
    TokenKind.DO,
    TokenKind.CLASS,
    TokenKind.MODULE,
    TokenKind.DEF,
    TokenKind.BEGIN,
    TokenKind.IF,
    TokenKind.UNLESS,
    TokenKind.CASE,
    TokenKind.WHILE,
    TokenKind.UNTIL,
    TokenKind.FOR,
})

BLOCK_KEYWORDS: dict[str, TokenKind] = {
    "do": TokenKind.DO,
    "end": TokenKind.END,
    "class": TokenKind.CLASS,
    "module": TokenKind.MODULE,
    "def": TokenKind.DEF,
    "begin": TokenKind.BEGIN,
    "if": TokenKind.IF,
    "unless": TokenKind.UNLESS,
    "case": TokenKind.CASE,
    "while": TokenKind.WHILE,
    "until": TokenKind.UNTIL,
    "for": TokenKind.FOR,
}

MODIFIERS: dict[TokenKind, TokenKind] = {
    TokenKind.IF: TokenKind.IF_MOD,
    TokenKind.UNLESS: TokenKind.UNLESS_MOD,
    TokenKind.WHILE: TokenKind.WHILE_MOD,
    TokenKind.UNTIL: TokenKind.UNTIL_MOD,
}

OTHER_KEYWORDS = frozenset({
    "BEGIN", "END", "__FILE__", "__LINE__", "__method__", "alias", "and",
    "break", "defined?", "else", "elsif", "ensure", "false", "in", "next",
    "nil", "not", "or", "redo", "rescue", "retry", "return", "self", "super",
    "then", "true", "undef", "when", "yield",
})

# Keywords after which an expression has ended (``return if x`` is a modifier).
VALUE_KEYWORDS = frozenset({
    "break", "false", "next", "nil", "redo", "retry", "return", "self",
    "super", "true", "yield", "__FILE__", "__LINE__", "__method__",
})


@dataclass(frozen=True)
class Token:
    """One lexical token: kind, 1-based line, 0-based column and raw text."""

    kind: TokenKind
    line: int
    column: int
    text: str

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.line}:{self.column}, {self.text!r})"


def tokens_to_s(tokens: Iterable[Token]) -> str:
    """Render a token run back to source text."""
    return "".join(tk.text for tk in tokens)


_PERCENT_LITERAL_RE = re.compile(r"%[qQwWiIrsx]?(.)", re.DOTALL)
_CLOSERS = {"(": ")", "[": "]", "{": "}", "<": ">"}


def unquote(text: str) -> str:
    """Strip the surrounding quote characters of a string literal."""
    if text.startswith("%"):
        m = _PERCENT_LITERAL_RE.match(text)
        if m:
            opener = m.group(1)
            closer = _CLOSERS.get(opener, opener)
            inner = text[m.end():]
            return inner[:-1] if inner.endswith(closer) else inner
    if len(text) >= 2 and text[0] in "\"'`" and text[-1] == text[0]:
        return text[1:-1]
    if text[:1] in "\"'`":
        return text[1:]
    return text


def literal_name(token: Token) -> str:
    """Return the bare name of a symbol, string, label or identifier token.

    ``:default``, ``"default"``, ``:"default"`` and ``default:`` all map to
    ``default``.
    """
    text = token.text
    if token.kind == TokenKind.LABEL:
        return unquote(text[:-1])
    if token.kind == TokenKind.SYMBOL:
        return unquote(text[1:])
    if token.kind == TokenKind.STRING:
        return unquote(text)
    return text
