"""knock — translate natural-language requests into shell commands."""

from knock.version import __version__

__all__ = ["__version__"]
