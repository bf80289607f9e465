"""Ruby tokenizer and token stream used by the Rake parser."""

from rakedoc.lexer.ruby_lex import RubyLexer, tokenize
from rakedoc.lexer.stream import TokenStream
from rakedoc.lexer.tokens import (
    BLOCK_OPENERS,
    Token,
    TokenKind,
    literal_name,
    tokens_to_s,
    unquote,
)

__all__ = [
    "BLOCK_OPENERS",
    "RubyLexer",
    "Token",
    "TokenKind",
    "TokenStream",
    "literal_name",
    "tokenize",
    "tokens_to_s",
    "unquote",
]
