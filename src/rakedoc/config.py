"""Configuration defaults, env vars, and runtime options for rakedoc."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


VERSION = "1.0.0"

# File names handled by the Rake parser.
DEFAULT_PATTERNS: tuple[str, ...] = (
    r"(?i)Rakefile(\.rb)?$",
    r"\.rake$",
)

OUTPUT_FORMATS = ("tree", "json")

EXTRA_PATTERNS_ENV = "RAKEDOC_EXTRA_PATTERNS"


@dataclass
class Config:
    """Runtime configuration, mirroring the command line flags."""

    # Input
    paths: list[str] = field(default_factory=lambda: ["."])
    patterns: list[str] = field(default_factory=lambda: list(DEFAULT_PATTERNS))
    extra_patterns: list[str] = field(default_factory=list)

    # Output
    output_format: str = "tree"
    output_file: str = ""
    show_stats: bool = True

    # Misc
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {self.output_format}")
        if self.output_file:
            self.output_format = "json"

        env_extra = os.environ.get(EXTRA_PATTERNS_ENV, "")
        extras = [p.strip() for p in env_extra.split(",") if p.strip()]
        extras.extend(self.extra_patterns)
        for pattern in extras:
            if pattern not in self.patterns:
                self.patterns.append(pattern)
