"""Reading Rakefile sources and writing reports as UTF-8."""

from __future__ import annotations

from pathlib import Path

from rakedoc import log

PathLike = Path | str


def read_source(path: PathLike) -> str:
    """Decode a Rakefile as UTF-8.

    Files with stray bytes (Latin-1 comments are common in old Rakefiles) are
    still parsed: undecodable bytes become U+FFFD and a warning names the
    first offending offset. A leading byte order mark is dropped.
    """
    data = Path(path).read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        log.warn(f"Invalid UTF-8 in {path} at byte {exc.start}, undecodable bytes replaced")
        return data.decode("utf-8-sig", errors="replace")


def write_output(path: PathLike, text: str) -> None:
    """Write *text* to *path*, creating missing parent directories."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
