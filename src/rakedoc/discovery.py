"""Find the Rake files under a set of paths."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from rakedoc import log
from rakedoc.config import DEFAULT_PATTERNS

SKIP_DIRS = frozenset({"vendor", "node_modules", "tmp", "pkg"})


def can_parse(path: Path | str, patterns: Iterable[str] = DEFAULT_PATTERNS) -> bool:
    """Return ``True`` when the file name matches one of the Rake patterns."""
    name = Path(path).name
    return any(re.search(pattern, name) for pattern in patterns)


def _walk(directory: Path, patterns: tuple[str, ...]) -> Iterable[Path]:
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            if entry.name.startswith(".") or entry.name in SKIP_DIRS:
                continue
            yield from _walk(entry, patterns)
        elif entry.is_file() and can_parse(entry, patterns):
            yield entry


def find_rakefiles(paths: Iterable[Path | str], patterns: Iterable[str] = DEFAULT_PATTERNS) -> list[Path]:
    """Expand *paths* into a sorted, de-duplicated list of Rake files.

    Directories are searched recursively, skipping hidden and vendored
    directories. Explicit files are kept only if they match *patterns*.
    """
    pats = tuple(patterns)
    found: set[Path] = set()
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            found.update(_walk(p, pats))
        elif p.is_file():
            if can_parse(p, pats):
                found.add(p)
            else:
                log.warn(f"Not a Rake file, skipping: {p}")
        else:
            log.warn(f"No such file or directory: {p}")
    return sorted(found)
