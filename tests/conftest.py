"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from drushfs.core.context import RunContext
from drushfs.temp.registry import TempRegistry


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory so no real config is read."""
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def run_context() -> RunContext:
    """Empty run context."""
    return RunContext()


@pytest.fixture
def exit_hooks() -> list[Callable[[], None]]:
    """Collects callbacks a TempRegistry would hand to atexit."""
    return []


@pytest.fixture
def registry(exit_hooks: list[Callable[[], None]]) -> TempRegistry:
    """TempRegistry whose exit hook is captured instead of installed."""
    return TempRegistry(install_hook=exit_hooks.append)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Small directory tree with nested dirs, files and an executable.

    Layout:
        src/
            readme.txt          "hello"
            empty.txt           ""
            bin/run.sh          "#!/bin/sh", mode 0o755
            data/nested/deep.txt "deep"
    """
    root = tmp_path / "src"
    (root / "bin").mkdir(parents=True)
    (root / "data" / "nested").mkdir(parents=True)
    (root / "readme.txt").write_text("hello")
    (root / "empty.txt").write_text("")
    script = root / "bin" / "run.sh"
    script.write_text("#!/bin/sh\n")
    script.chmod(0o755)
    (root / "data" / "nested" / "deep.txt").write_text("deep")
    return root


def _snapshot(root: Path) -> dict[str, tuple[str, bytes | None, int]]:
    """Describe a tree as {relative path: (kind, content, permission bits)}."""
    result: dict[str, tuple[str, bytes | None, int]] = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        mode = path.lstat().st_mode & 0o777
        if path.is_symlink():
            result[rel] = ("link", str(path.readlink()).encode(), 0)
        elif path.is_dir():
            result[rel] = ("dir", None, mode)
        else:
            result[rel] = ("file", path.read_bytes(), mode)
    return result


@pytest.fixture
def snapshot_tree() -> Callable[[Path], dict[str, tuple[str, bytes | None, int]]]:
    """Function describing a tree as {relative path: (kind, content, mode)}."""
    return _snapshot
