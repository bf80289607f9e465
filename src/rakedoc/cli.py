"""rakedoc CLI.

Installed as ``rakedoc`` console_script; also runs as ``python -m rakedoc``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from rakedoc import __version__
from rakedoc import log
from rakedoc.config import Config
from rakedoc.discovery import find_rakefiles
from rakedoc.io_utils import read_source, write_output
from rakedoc.model import TopLevel
from rakedoc.parser import RakeParser
from rakedoc.render import build_tree, to_json
from rakedoc.stats import Stats


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the extracted model as JSON")
@click.option("--output", "-o", default="", help="Write JSON to this file instead of stdout")
@click.option("--stats/--no-stats", "show_stats", default=True, help="Show the summary table")
@click.option("--pattern", "-p", "patterns", multiple=True, help="Extra file name regex to treat as a Rakefile")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="rakedoc")
def main(
    paths: tuple[Path, ...],
    as_json: bool,
    output: str,
    show_stats: bool,
    patterns: tuple[str, ...],
    verbose: bool,
) -> None:
    """rakedoc: document the tasks of Rakefiles.

    Finds Rakefile, Rakefile.rb and *.rake files under PATHS (default: the
    current directory) and lists their namespaces, tasks, descriptions and
    dependencies.

    \b
    EXAMPLES:
      rakedoc                          # Scan the current directory
      rakedoc Rakefile lib/tasks       # Scan a file and a directory
      rakedoc --json -o tasks.json     # Export as JSON
      rakedoc -p '\\.thor$' tasks/      # Also parse *.thor files
    """
    cfg = Config(
        paths=[str(p) for p in paths] or ["."],
        extra_patterns=list(patterns),
        output_format="json" if as_json else "tree",
        output_file=output,
        show_stats=show_stats,
        verbose=verbose,
    )

    _run(cfg)


def _run(cfg: Config) -> None:
    log.set_verbose(cfg.verbose)

    files = find_rakefiles(cfg.paths, cfg.patterns)
    if not files:
        log.error(f"No Rake files found in: {', '.join(cfg.paths)}")
        sys.exit(1)

    stats = Stats()
    results: list[TopLevel] = []
    for path in files:
        try:
            content = read_source(path)
        except OSError as exc:
            log.warn(f"Could not read {path}: {exc}")
            continue
        results.append(RakeParser(str(path), content, stats).scan())

    if cfg.output_format == "json":
        payload = to_json(results)
        if cfg.output_file:
            write_output(cfg.output_file, payload + "\n")
            log.success(f"Wrote {len(results)} file(s) to {cfg.output_file}")
        else:
            # stdout carries the JSON document only
            click.echo(payload)
            return
    else:
        for top in results:
            log.console.print(build_tree(top))

    if cfg.show_stats:
        stats.report()
