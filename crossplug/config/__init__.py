"""Configuration models and parsing for Crossplug."""
