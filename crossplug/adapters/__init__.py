"""Component adapters for Crossplug.

This module provides the adapter registration system. Each component kind
produced by the dispatcher's classification (documents, skills, commands,
hook manifests) is handled by exactly one adapter implementing the
ComponentAdapter interface.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crossplug.adapters.base import ComponentAdapter
    from crossplug.config.schemas import PlacementContext

_ADAPTERS: dict[str, type[ComponentAdapter]] = {}
_LOADED = False

# Known adapter modules - add new adapters here
_ADAPTER_MODULES = [
    "crossplug.adapters.command",
    "crossplug.adapters.hook",
    "crossplug.adapters.markdown",
    "crossplug.adapters.skill",
]


def register_adapter(
    kind: str,
) -> Callable[[type[ComponentAdapter]], type[ComponentAdapter]]:
    """Decorator for adapter registration.

    Usage:
        @register_adapter("skill")
        class SkillAdapter(ComponentAdapter):
            ...
    """

    def decorator(cls: type[ComponentAdapter]) -> type[ComponentAdapter]:
        _ADAPTERS[kind] = cls
        return cls

    return decorator


def _load_adapters() -> None:
    """Load all adapter modules to trigger registration."""
    global _LOADED
    if _LOADED:
        return

    for module_name in _ADAPTER_MODULES:
        importlib.import_module(module_name)

    _LOADED = True


def get_adapter(kind: str, context: PlacementContext) -> ComponentAdapter:
    """Get an instantiated adapter for a component kind.

    Args:
        kind: The component kind (e.g., "skill", "command")
        context: Placement of the adapted files

    Returns:
        An instantiated adapter

    Raises:
        ValueError: If no adapter is registered for the kind
    """
    _load_adapters()

    if kind not in _ADAPTERS:
        available = ", ".join(_ADAPTERS.keys()) or "none"
        raise ValueError(f"No adapter for component kind: {kind}. Available: {available}")
    return _ADAPTERS[kind](context)
