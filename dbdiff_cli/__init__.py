"""Command line interface for dbdiff."""

from dbdiff import __version__

__all__ = ["__version__"]
