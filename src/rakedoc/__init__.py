"""rakedoc: documentation extraction for Rakefiles."""

from rakedoc.config import VERSION as __version__

__all__ = ["__version__"]
