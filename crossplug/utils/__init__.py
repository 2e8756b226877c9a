"""Utility helpers for Crossplug."""
