"""Crossplug - adapt Claude Code plugins into Cursor workspace artifacts."""

__version__ = "0.1.0"
