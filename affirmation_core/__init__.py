"""Encrypted local-first data core for the affirmation app and its home-screen widget."""

from .version import __version__

__all__ = ["__version__"]
