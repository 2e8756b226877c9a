"""Shared fixtures for Crossplug tests."""

import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from crossplug.config.schemas import PlacementContext


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="crossplug_test_")).resolve()
    yield path
    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def temp_project(temp_dir: Path) -> Path:
    """Create a temporary target workspace."""
    project_dir = temp_dir / "project"
    project_dir.mkdir()
    return project_dir


@pytest.fixture
def plugin_dir(temp_dir: Path) -> Path:
    """Create an empty plugin directory."""
    path = temp_dir / "plugin"
    path.mkdir()
    return path


@pytest.fixture
def placement(temp_project: Path, plugin_dir: Path) -> PlacementContext:
    """Placement for marketplace "m", plugin "p", contained to the plugin dir."""
    return PlacementContext(
        project_root=temp_project,
        marketplace_name="m",
        plugin_name="p",
        plugin_root=plugin_dir,
    )


@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    """Return a helper that writes a text file, creating parent directories."""

    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def skill_plugin(plugin_dir: Path, write_file) -> Path:
    """Plugin with one skill (anchor plus two assets)."""
    skill_dir = plugin_dir / "skills" / "my-skill"
    write_file(
        skill_dir / "SKILL.md",
        "---\nname: my-skill\ndescription: Runs the thing\n---\n# My Skill\n\nUse run.sh.\n",
    )
    write_file(skill_dir / "scripts" / "run.sh", "#!/bin/sh\necho run\n")
    write_file(skill_dir / "reference" / "docs.txt", "Reference docs\n")
    return plugin_dir
