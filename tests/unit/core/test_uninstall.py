"""Tests for crossplug.core.uninstall module."""

import json
from pathlib import Path

import pytest

from crossplug.adapters.dispatcher import adapt
from crossplug.config.schemas import InstallRecord, PlacementContext
from crossplug.core.uninstall import uninstall
from crossplug.utils.safe_access import PathTraversalError


@pytest.fixture
def hooked_plugin(skill_plugin: Path, write_file) -> Path:
    """Skill plugin plus a hooks document with a script."""
    write_file(skill_plugin / "scripts" / "check.sh", "#!/bin/sh\nexit 0\n")
    write_file(
        skill_plugin / "hooks" / "hooks.json",
        json.dumps(
            {
                "hooks": {
                    "Stop": [
                        {"hooks": [{"type": "command", "command": "${CLAUDE_PLUGIN_ROOT}/scripts/check.sh"}]}
                    ]
                }
            }
        ),
    )
    return skill_plugin


def plugin_files(plugin: Path) -> list[Path]:
    return sorted(p for p in plugin.rglob("*") if p.is_file())


class TestUninstall:
    """Tests for uninstall function."""

    def test_removes_everything_it_created(self, placement: PlacementContext, hooked_plugin: Path):
        record = adapt(plugin_files(hooked_plugin), placement).to_record(placement)
        project = placement.project_root

        result = uninstall(record, project)

        assert result.hooks_changed is True
        assert set(result.removed) == set(record.files) - {".cursor/hooks.json"}
        assert result.missing == []
        for rel_path in record.files:
            assert not (project / rel_path).exists()
        # Only the .cursor directory itself remains
        assert list((project / ".cursor").iterdir()) == []

    def test_keeps_other_hooks_and_files(self, placement: PlacementContext, hooked_plugin: Path):
        project = placement.project_root
        manifest = project / ".cursor" / "hooks.json"
        manifest.parent.mkdir()
        manifest.write_text(json.dumps({"version": 1, "hooks": {"stop": [{"command": "theirs"}]}}))
        own_rule = project / ".cursor" / "rules" / "mine.mdc"
        own_rule.parent.mkdir()
        own_rule.write_text("mine")

        record = adapt(plugin_files(hooked_plugin), placement).to_record(placement)
        uninstall(record, project)

        assert json.loads(manifest.read_text()) == {"version": 1, "hooks": {"stop": [{"command": "theirs"}]}}
        assert own_rule.read_text() == "mine"
        assert not (project / ".cursor" / "rules" / "crossplug").exists()

    def test_reports_missing_files(self, placement: PlacementContext, skill_plugin: Path):
        record = adapt(plugin_files(skill_plugin), placement).to_record(placement)
        (placement.project_root / record.files[0]).unlink()

        result = uninstall(record, placement.project_root)

        assert result.missing == [record.files[0]]
        assert result.hooks_changed is False

    def test_rejects_paths_outside_project(self, temp_project: Path, temp_dir: Path):
        victim = temp_dir / "victim.txt"
        victim.write_text("keep me")
        record = InstallRecord(marketplace="m", plugin="p", files=["../victim.txt"])

        with pytest.raises(PathTraversalError):
            uninstall(record, temp_project)

        assert victim.read_text() == "keep me"
