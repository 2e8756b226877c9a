"""Command-line interface for Crossplug."""
