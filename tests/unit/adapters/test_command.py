"""Tests for crossplug.adapters.command module."""

from pathlib import Path

from crossplug.adapters.command import (
    BASH_EXECUTION_NOTE,
    CommandAdapter,
    find_script_references,
)
from crossplug.config.schemas import ComponentCluster, PlacementContext
from crossplug.utils import frontmatter
from crossplug.utils.filesystem import is_executable

COMMAND_ROOT = ".cursor/commands/crossplug/m/p"


class TestFindScriptReferences:
    """Tests for find_script_references function."""

    def test_distinct_in_order(self):
        text = (
            "Run ${CLAUDE_PLUGIN_ROOT}/scripts/b.sh, then ${CLAUDE_PLUGIN_ROOT}/scripts/a.sh.\n"
            "Again: ${CLAUDE_PLUGIN_ROOT}/scripts/b.sh\n"
        )

        assert find_script_references(text) == ["scripts/b.sh", "scripts/a.sh"]

    def test_bare_token_has_no_reference(self):
        assert find_script_references("cd ${CLAUDE_PLUGIN_ROOT} && ls") == []


class TestCommandAdapter:
    """Tests for CommandAdapter."""

    def test_copies_script_found_up_the_tree(self, placement: PlacementContext, plugin_dir: Path, write_file):
        """A script two directories above the command is copied and the token rewritten."""
        write_file(plugin_dir / "scripts" / "setup.sh", "#!/bin/sh\necho setup\n")
        command = write_file(
            plugin_dir / "commands" / "tools" / "deploy.md",
            "---\ndescription: Deploy\n---\n"
            "Run `${CLAUDE_PLUGIN_ROOT}/scripts/setup.sh` first.\n"
            "Then run ${CLAUDE_PLUGIN_ROOT}/scripts/setup.sh.\n",
        )

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        assert output.files == [f"{COMMAND_ROOT}/deploy.md", f"{COMMAND_ROOT}/scripts/setup.sh"]
        assert output.warnings == []
        root = placement.project_root
        content = (root / output.files[0]).read_text()
        assert "${CLAUDE_PLUGIN_ROOT}" not in content
        assert content == (
            "---\ndescription: Deploy\n---\n"
            f"Run `{COMMAND_ROOT}/scripts/setup.sh` first.\n"
            f"Then run {COMMAND_ROOT}/scripts/setup.sh.\n"
        )
        assert is_executable(root / output.files[1])
        assert (root / output.files[1]).read_text() == "#!/bin/sh\necho setup\n"

    def test_missing_script_keeps_token(self, placement: PlacementContext, plugin_dir: Path, write_file):
        """Unresolved references stay intact and produce a warning."""
        command = write_file(
            plugin_dir / "commands" / "deploy.md",
            "---\ndescription: Deploy\n---\nRun ${CLAUDE_PLUGIN_ROOT}/scripts/setup.sh\n",
        )

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        assert output.files == [f"{COMMAND_ROOT}/deploy.md"]
        content = (placement.project_root / output.files[0]).read_text()
        assert "${CLAUDE_PLUGIN_ROOT}/scripts/setup.sh" in content
        assert len(output.warnings) == 1
        assert "scripts/setup.sh" in output.warnings[0]

    def test_search_stays_inside_plugin_root(
        self, placement: PlacementContext, temp_dir: Path, plugin_dir: Path, write_file
    ):
        """Scripts above the plugin root are never picked up."""
        write_file(temp_dir / "scripts" / "setup.sh", "outside\n")
        command = write_file(plugin_dir / "commands" / "deploy.md", "${CLAUDE_PLUGIN_ROOT}/scripts/setup.sh\n")

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        assert output.files == [f"{COMMAND_ROOT}/deploy.md"]
        assert len(output.warnings) == 1

    def test_resolved_and_missing_mixed(self, placement: PlacementContext, plugin_dir: Path, write_file):
        write_file(plugin_dir / "scripts" / "ok.sh", "ok\n")
        command = write_file(
            plugin_dir / "commands" / "mixed.md",
            "---\ndescription: Mixed\n---\n"
            "${CLAUDE_PLUGIN_ROOT}/scripts/ok.sh and ${CLAUDE_PLUGIN_ROOT}/scripts/gone.sh\n",
        )

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        content = (placement.project_root / output.files[0]).read_text()
        assert f"{COMMAND_ROOT}/scripts/ok.sh and ${{CLAUDE_PLUGIN_ROOT}}/scripts/gone.sh" in content
        assert output.files[1:] == [f"{COMMAND_ROOT}/scripts/ok.sh"]

    def test_bare_token_rewritten_to_root(self, placement: PlacementContext, plugin_dir: Path, write_file):
        command = write_file(
            plugin_dir / "commands" / "where.md",
            "---\ndescription: Where\n---\ncd ${CLAUDE_PLUGIN_ROOT} && ls\n",
        )

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        content = (placement.project_root / output.files[0]).read_text()
        assert content.endswith(f"cd {COMMAND_ROOT} && ls\n")

    def test_bash_execution_note(self, placement: PlacementContext, plugin_dir: Path, write_file):
        """Inline ! execution gets an explanatory note after the block."""
        command = write_file(
            plugin_dir / "commands" / "status.md",
            "---\ndescription: Status\nallowed-tools: Bash(git status:*)\n---\nCurrent: !`git status`\n",
        )

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        content = (placement.project_root / output.files[0]).read_text()
        assert content == (
            "---\ndescription: Status\nallowed-tools: Bash(git status:*)\n---\n"
            + BASH_EXECUTION_NOTE
            + "Current: !`git status`\n"
        )
        assert "reference" in BASH_EXECUTION_NOTE

    def test_no_note_without_marker(self, placement: PlacementContext, plugin_dir: Path, write_file):
        text = "---\ndescription: Plain\nargument-hint: <file>\nmodel: sonnet\n---\nDo `ls`.\n"
        command = write_file(plugin_dir / "commands" / "plain.md", text)

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        assert (placement.project_root / output.files[0]).read_text() == text

    def test_synthesizes_description(self, placement: PlacementContext, plugin_dir: Path, write_file):
        command = write_file(plugin_dir / "commands" / "review.md", "Review the diff.\n")

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        content = (placement.project_root / output.files[0]).read_text()
        assert frontmatter.parse_block(content) == {"description": "Command from review.md"}
        assert content.endswith("---\nReview the diff.\n")

    def test_output_is_flat(self, placement: PlacementContext, plugin_dir: Path, write_file):
        command = write_file(plugin_dir / "commands" / "a" / "b" / "deep.md", "Deep\n")

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        assert output.files == [f"{COMMAND_ROOT}/deep.md"]

    def test_shared_script_recorded_once(self, placement: PlacementContext, plugin_dir: Path, write_file):
        write_file(plugin_dir / "scripts" / "common.sh", "common\n")
        first = write_file(plugin_dir / "commands" / "one.md", "${CLAUDE_PLUGIN_ROOT}/scripts/common.sh\n")
        second = write_file(plugin_dir / "commands" / "two.md", "${CLAUDE_PLUGIN_ROOT}/scripts/common.sh\n")

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [first, second]))

        assert output.files == [
            f"{COMMAND_ROOT}/one.md",
            f"{COMMAND_ROOT}/scripts/common.sh",
            f"{COMMAND_ROOT}/two.md",
        ]

    def test_traversing_reference_is_left_in_place(
        self, placement: PlacementContext, plugin_dir: Path, temp_dir: Path, write_file
    ):
        """A reference leaving the plugin is reported and never copied."""
        write_file(temp_dir / "secret.sh", "secret\n")
        command = write_file(
            plugin_dir / "commands" / "evil.md",
            "${CLAUDE_PLUGIN_ROOT}/../secret.sh\ncd ${CLAUDE_PLUGIN_ROOT}\n",
        )

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [command]))

        assert output.files == [f"{COMMAND_ROOT}/evil.md"]
        assert len(output.warnings) == 1
        assert "../secret.sh" in output.warnings[0]
        content = (placement.project_root / output.files[0]).read_text()
        assert "${CLAUDE_PLUGIN_ROOT}/../secret.sh" in content
        assert f"cd {COMMAND_ROOT}\n" in content
        assert not (placement.project_root / ".cursor" / "commands" / "crossplug" / "m" / "secret.sh").exists()

    def test_invalid_utf8_command_skipped(self, placement: PlacementContext, plugin_dir: Path, write_file):
        """An undecodable command is reported; the others are still adapted."""
        broken = plugin_dir / "commands" / "broken.md"
        broken.parent.mkdir(parents=True)
        broken.write_bytes(b"Run \xff\xfe\n")
        good = write_file(plugin_dir / "commands" / "good.md", "Good\n")

        output = CommandAdapter(placement).adapt(ComponentCluster("command", [broken, good]))

        assert output.files == [f"{COMMAND_ROOT}/good.md"]
        assert output.warnings == ["Skipped broken.md: not valid UTF-8 text"]
