"""Unit tests for the recursive tree primitives.

Tests delete_tree, delete_tree_contents, copy_tree, ensure_path
and file_nonempty against real temporary directories.
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from drushfs.filesystem.tree import (
    copy_tree,
    delete_tree,
    delete_tree_contents,
    ensure_path,
    file_nonempty,
)

posix_only = pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permission bits")


class TestDeleteTree:
    """Tests for delete_tree."""

    def test_nonexistent_path_succeeds(self, tmp_path: Path) -> None:
        """Deleting a missing path succeeds without side effects."""
        before = sorted(tmp_path.iterdir())

        assert delete_tree(tmp_path / "missing") is True
        assert sorted(tmp_path.iterdir()) == before

    def test_delete_file(self, tmp_path: Path) -> None:
        """A single file is unlinked."""
        target = tmp_path / "file.txt"
        target.write_text("content")

        assert delete_tree(target) is True
        assert not target.exists()

    def test_delete_populated_tree(self, sample_tree: Path) -> None:
        """Every file and subdirectory is removed, then the root itself."""
        assert delete_tree(sample_tree) is True
        assert not sample_tree.exists()

    def test_accepts_string_path(self, sample_tree: Path) -> None:
        """String paths are accepted."""
        assert delete_tree(str(sample_tree)) is True
        assert not sample_tree.exists()

    def test_symlink_to_directory_is_not_followed(self, tmp_path: Path) -> None:
        """Deleting a symlink removes the link, not the tree it points to."""
        real_dir = tmp_path / "real"
        real_dir.mkdir()
        (real_dir / "keep.txt").write_text("keep")
        link = tmp_path / "link"
        link.symlink_to(real_dir, target_is_directory=True)

        assert delete_tree(link) is True
        assert not link.is_symlink()
        assert (real_dir / "keep.txt").read_text() == "keep"

    def test_symlink_inside_tree_is_not_followed(self, tmp_path: Path) -> None:
        """Links inside a deleted tree leave their targets alone."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "keep.txt").write_text("keep")
        tree = tmp_path / "tree"
        tree.mkdir()
        (tree / "link").symlink_to(outside, target_is_directory=True)

        assert delete_tree(tree) is True
        assert not tree.exists()
        assert (outside / "keep.txt").exists()

    def test_dead_symlink(self, tmp_path: Path) -> None:
        """A dangling symlink is deleted."""
        link = tmp_path / "dead"
        link.symlink_to(tmp_path / "nowhere")

        assert delete_tree(link) is True
        assert not link.is_symlink()

    def test_stops_at_first_failure(self, sample_tree: Path) -> None:
        """A failing unlink aborts the walk and returns False."""
        with patch.object(Path, "unlink", side_effect=OSError("Permission denied")):
            assert delete_tree(sample_tree) is False

        # Nothing could be unlinked, so the root is still there
        assert sample_tree.exists()


class TestDeleteTreeContents:
    """Tests for delete_tree_contents."""

    def test_empties_directory_but_keeps_it(self, sample_tree: Path) -> None:
        """All children go, the directory stays."""
        assert delete_tree_contents(sample_tree) is True
        assert sample_tree.is_dir()
        assert list(sample_tree.iterdir()) == []

    def test_missing_directory_fails(self, tmp_path: Path) -> None:
        """A directory that cannot be listed is a failure."""
        assert delete_tree_contents(tmp_path / "missing") is False


class TestCopyTree:
    """Tests for copy_tree."""

    def test_copies_structure_and_content(
        self, sample_tree: Path, tmp_path: Path, snapshot_tree
    ) -> None:
        """The copy matches the source entry for entry; the source is unchanged."""
        before = snapshot_tree(sample_tree)
        dest = tmp_path / "dest"

        assert copy_tree(sample_tree, dest) is True
        assert snapshot_tree(dest) == before
        assert snapshot_tree(sample_tree) == before

    @posix_only
    def test_preserves_permission_bits(self, sample_tree: Path, tmp_path: Path) -> None:
        """Mode bits of files and directories are copied."""
        (sample_tree / "data").chmod(0o750)
        dest = tmp_path / "dest"

        assert copy_tree(sample_tree, dest) is True
        assert (dest / "bin" / "run.sh").stat().st_mode & 0o777 == 0o755
        assert (dest / "data").stat().st_mode & 0o777 == 0o750

    def test_skips_permission_bits_on_windows(self, sample_tree: Path, tmp_path: Path) -> None:
        """copymode is never called on the Windows family."""
        with (
            patch("drushfs.filesystem.tree.is_windows_family", return_value=True),
            patch("drushfs.filesystem.tree.shutil.copymode") as mock_copymode,
        ):
            assert copy_tree(sample_tree, tmp_path / "dest") is True

        mock_copymode.assert_not_called()

    def test_copies_single_file(self, tmp_path: Path) -> None:
        """A regular file source produces a file copy."""
        src = tmp_path / "one.txt"
        src.write_bytes(b"\x00\x01payload")
        dest = tmp_path / "two.txt"

        assert copy_tree(src, dest) is True
        assert dest.read_bytes() == b"\x00\x01payload"

    def test_recreates_symlinks(self, tmp_path: Path) -> None:
        """Symlinks are copied as links with the same target."""
        src = tmp_path / "src"
        src.mkdir()
        (src / "target.txt").write_text("t")
        (src / "link.txt").symlink_to("target.txt")
        dest = tmp_path / "dest"

        assert copy_tree(src, dest) is True
        assert (dest / "link.txt").is_symlink()
        assert os.readlink(dest / "link.txt") == "target.txt"

    def test_children_listed_before_destination_is_created(self, tmp_path: Path) -> None:
        """A destination created inside the source is not copied into itself."""
        flat = tmp_path / "flat"
        flat.mkdir()
        (flat / "a.txt").write_text("a")
        (flat / "b.txt").write_text("b")
        dest = flat / "sub"

        assert copy_tree(flat, dest) is True
        assert sorted(p.name for p in dest.iterdir()) == ["a.txt", "b.txt"]

    def test_missing_source_fails(self, tmp_path: Path) -> None:
        """Copying a missing source returns False."""
        assert copy_tree(tmp_path / "missing", tmp_path / "dest") is False

    def test_aborts_on_child_failure(self, sample_tree: Path, tmp_path: Path) -> None:
        """A failing byte copy aborts the whole copy."""
        with patch(
            "drushfs.filesystem.tree.shutil.copyfile",
            side_effect=OSError("No space left on device"),
        ):
            assert copy_tree(sample_tree, tmp_path / "dest") is False


class TestEnsurePath:
    """Tests for ensure_path."""

    def test_creates_missing_ancestors(self, tmp_path: Path) -> None:
        """All missing parents are created."""
        target = tmp_path / "a" / "b" / "c"

        assert ensure_path(target) is True
        assert target.is_dir()

    def test_idempotent(self, tmp_path: Path) -> None:
        """A second call succeeds and changes nothing."""
        target = tmp_path / "a" / "b"

        assert ensure_path(target) is True
        first = sorted(p.relative_to(tmp_path) for p in tmp_path.rglob("*"))
        assert ensure_path(target) is True
        second = sorted(p.relative_to(tmp_path) for p in tmp_path.rglob("*"))

        assert first == second

    def test_file_in_the_way(self, tmp_path: Path) -> None:
        """A regular file where a directory should go is a failure."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        assert ensure_path(blocker) is False
        assert ensure_path(blocker / "child") is False

    def test_mkdir_error(self, tmp_path: Path) -> None:
        """OSError from mkdir is reported as False."""
        with patch.object(Path, "mkdir", side_effect=OSError("Read-only file system")):
            assert ensure_path(tmp_path / "new") is False


class TestFileNonempty:
    """Tests for file_nonempty."""

    def test_nonempty_file(self, tmp_path: Path) -> None:
        """A file with content is non-empty."""
        target = tmp_path / "f.txt"
        target.write_text("x")
        assert file_nonempty(target) is True

    def test_empty_file(self, tmp_path: Path) -> None:
        """A zero-byte file is empty."""
        target = tmp_path / "f.txt"
        target.touch()
        assert file_nonempty(target) is False

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is not non-empty."""
        assert file_nonempty(tmp_path / "missing") is False
