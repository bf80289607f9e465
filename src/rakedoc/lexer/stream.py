"""Pull-based token stream with one-token pushback and token capture."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

from rakedoc.lexer.tokens import Token, TokenKind
from rakedoc.signals import EndOfInput


class TokenStream:
    """Sequential reader over a token iterator.

    Usage::

        stream = TokenStream(tokenize(source))
        tk = stream.get_tk()              # next token, None at end of input
        stream.unget_tk(tk)               # buffer it for the next read
        stream.skip_tkspace(False)        # skip spaces, stop at a newline
        run = stream.read_until(TokenKind.NL)

        with stream.capture(tk) as run:   # record every token read
            ...
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = iter(tokens)
        self._buffered: Token | None = None
        self._captures: list[list[Token]] = []

    # ── reading ──────────────────────────────────────────────────

    def get_tk(self) -> Token | None:
        if self._buffered is not None:
            tk, self._buffered = self._buffered, None
        else:
            tk = next(self._tokens, None)
            if tk is None:
                return None
        for run in self._captures:
            run.append(tk)
        return tk

    def require_tk(self) -> Token:
        """Return the next token, raising :class:`EndOfInput` when there is none."""
        tk = self.get_tk()
        if tk is None:
            raise EndOfInput()
        return tk

    def unget_tk(self, tk: Token) -> None:
        if self._buffered is not None:
            raise RuntimeError(
                f"pushback buffer already holds {self._buffered!r}, cannot push back {tk!r}"
            )
        self._buffered = tk
        for run in self._captures:
            if run and run[-1] is tk:
                run.pop()

    def peek_tk(self) -> Token | None:
        tk = self.get_tk()
        if tk is not None:
            self.unget_tk(tk)
        return tk

    # ── skipping ─────────────────────────────────────────────────

    def skip_tkspace(self, skip_nl: bool = True) -> list[Token]:
        """Skip space tokens (and line breaks when *skip_nl*). Returns the skipped run."""
        skipped: list[Token] = []
        while True:
            tk = self.get_tk()
            if tk is None:
                return skipped
            if tk.kind == TokenKind.SPACE or (skip_nl and tk.kind == TokenKind.NL):
                skipped.append(tk)
                continue
            self.unget_tk(tk)
            return skipped

    def read_until(self, *kinds: TokenKind) -> list[Token]:
        """Read tokens up to and including the first one of *kinds*.

        Stops at end of input with whatever was read.
        """
        run: list[Token] = []
        while True:
            tk = self.get_tk()
            if tk is None:
                return run
            run.append(tk)
            if tk.kind in kinds:
                return run

    # ── capture ──────────────────────────────────────────────────

    @contextmanager
    def capture(self, *seed: Token) -> Iterator[list[Token]]:
        """Collect every token read inside the block, starting with *seed*."""
        run = list(seed)
        self._captures.append(run)
        try:
            yield run
        finally:
            for i, active in enumerate(self._captures):
                if active is run:
                    del self._captures[i]
                    break
