"""Tests for crossplug.utils.filesystem module."""

from pathlib import Path

from crossplug.utils.filesystem import (
    EXECUTABLE_MODE,
    copy_file,
    ensure_directory,
    is_executable,
    read_text_file,
    remove_empty_parents,
    remove_file,
    to_record_path,
    write_text_file,
)


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_creates_nested_directories(self, temp_dir: Path):
        """Creates nested directories."""
        nested_dir = temp_dir / "a" / "b" / "c"

        result = ensure_directory(nested_dir)

        assert nested_dir.is_dir()
        assert result == nested_dir

    def test_handles_existing_directory(self, temp_dir: Path):
        """Handles existing directory without error."""
        ensure_directory(temp_dir)

        assert temp_dir.is_dir()


class TestCopyFile:
    """Tests for copy_file function."""

    def test_copies_bytes(self, temp_dir: Path):
        """Copies content byte-for-byte, creating parents."""
        src = temp_dir / "src.bin"
        src.write_bytes(b"\x00\x01binary\xff")
        dest = temp_dir / "out" / "dest.bin"

        copy_file(src, dest)

        assert dest.read_bytes() == b"\x00\x01binary\xff"

    def test_executable(self, temp_dir: Path):
        """Sets 0o755 when asked."""
        src = temp_dir / "run.sh"
        src.write_text("#!/bin/sh\n")
        src.chmod(0o644)
        dest = temp_dir / "copy.sh"

        copy_file(src, dest, executable=True)

        assert dest.stat().st_mode & 0o777 == EXECUTABLE_MODE
        assert is_executable(dest)

    def test_not_executable_by_default(self, temp_dir: Path):
        src = temp_dir / "data.txt"
        src.write_text("x")
        src.chmod(0o644)
        dest = temp_dir / "copy.txt"

        copy_file(src, dest)

        assert not is_executable(dest)


class TestWriteTextFile:
    """Tests for write_text_file function."""

    def test_writes_and_reads(self, temp_dir: Path):
        path = temp_dir / "nested" / "file.txt"

        write_text_file(path, "héllo\n")

        assert read_text_file(path) == "héllo\n"

    def test_overwrites_without_leftovers(self, temp_dir: Path):
        """Replaces existing content and leaves no temporary files."""
        path = temp_dir / "file.json"
        path.write_text("old")

        write_text_file(path, "new")

        assert path.read_text() == "new"
        assert [p.name for p in temp_dir.iterdir()] == ["file.json"]


class TestRemoval:
    """Tests for remove_file and remove_empty_parents."""

    def test_remove_file(self, temp_dir: Path):
        path = temp_dir / "file.txt"
        path.write_text("x")

        assert remove_file(path) is True
        assert not path.exists()
        assert remove_file(path) is False

    def test_prunes_empty_parents_up_to_stop(self, temp_dir: Path):
        """Removes empty directories but never the stop directory."""
        stop = temp_dir / ".cursor"
        leaf = stop / "rules" / "crossplug" / "m" / "p" / "file.mdc"
        leaf.parent.mkdir(parents=True)

        removed = remove_empty_parents(leaf, stop)

        assert removed[0] == stop / "rules" / "crossplug" / "m" / "p"
        assert removed[-1] == stop / "rules"
        assert stop.is_dir()
        assert not (stop / "rules").exists()

    def test_stops_at_non_empty_directory(self, temp_dir: Path):
        stop = temp_dir / ".cursor"
        (stop / "rules" / "other").mkdir(parents=True)
        leaf = stop / "rules" / "mine" / "file.mdc"
        leaf.parent.mkdir()

        removed = remove_empty_parents(leaf, stop)

        assert removed == [stop / "rules" / "mine"]
        assert (stop / "rules" / "other").is_dir()

    def test_outside_stop_does_nothing(self, temp_dir: Path):
        stop = temp_dir / ".cursor"
        stop.mkdir()
        leaf = temp_dir / "elsewhere" / "file.txt"
        leaf.parent.mkdir()

        assert remove_empty_parents(leaf, stop) == []
        assert leaf.parent.is_dir()


class TestToRecordPath:
    """Tests for to_record_path function."""

    def test_posix_relative(self, temp_dir: Path):
        path = temp_dir / ".cursor" / "rules" / "a.mdc"

        assert to_record_path(path, temp_dir) == ".cursor/rules/a.mdc"
