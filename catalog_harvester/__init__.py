"""Incremental harvester for a paginated book catalog."""

from .version import __version__

__all__ = ["__version__"]
