"""Abort signals that end a Rakefile scan early.

Both unwind through any depth of namespace recursion and are caught once by
:meth:`rakedoc.parser.RakeParser.scan`, which keeps the partial result.
"""

from __future__ import annotations


class ScanAbort(Exception):
    """Base class for signals that stop the dispatch loop."""


class EndOfDocument(ScanAbort):
    """The document asked for documentation to stop (``# :enddoc:``)."""


class EndOfInput(ScanAbort):
    """The token stream ran out where a token was required."""
