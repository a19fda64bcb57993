"""Tests for prism_router.routing.discovery — recursive file discovery."""

import re
from pathlib import Path

import pytest

from prism_router.errors import ConfigurationError, DiscoveryError, NoRoutesError
from prism_router.routing import discovery
from prism_router.routing.discovery import discover_files


def _touch(root: Path, *relative: str) -> None:
    for rel in relative:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")


@pytest.mark.anyio
class TestDiscoverFiles:
    async def test_matches_recursively(self, tmp_path: Path) -> None:
        _touch(tmp_path, "a.py", "nested/b.py", "nested/deeper/c.py", "notes.txt")
        files = await discover_files(tmp_path, re.compile(r"\.py$"))
        assert [f.name for f in files] == ["a.py", "b.py", "c.py"]

    async def test_returns_absolute_paths(self, tmp_path: Path) -> None:
        _touch(tmp_path, "a.py")
        files = await discover_files(tmp_path, r"\.py$")
        assert all(f.is_absolute() for f in files)

    async def test_sorted_lexicographically(self, tmp_path: Path) -> None:
        _touch(tmp_path, "z.py", "b/y.py", "a/x.py", "m.py", "b/a.py")
        files = await discover_files(tmp_path, r"\.py$")
        normalized = [f.as_posix() for f in files]
        assert normalized == sorted(normalized)
        assert [f.relative_to(tmp_path).as_posix() for f in files] == [
            "a/x.py",
            "b/a.py",
            "b/y.py",
            "m.py",
            "z.py",
        ]

    async def test_excludes_dot_and_dependency_dirs(self, tmp_path: Path) -> None:
        _touch(
            tmp_path,
            "routes/users.py",
            ".git/hooks/users.py",
            "node_modules/pkg/users.py",
            "routes/__pycache__/users.py",
            ".venv/lib/users.py",
        )
        files = await discover_files(tmp_path, r"users\.py$")
        assert [f.relative_to(tmp_path).as_posix() for f in files] == ["routes/users.py"]

    async def test_pattern_searches_whole_path(self, tmp_path: Path) -> None:
        _touch(tmp_path, "api/users.py", "admin/users.py")
        files = await discover_files(tmp_path, r"/api/.*\.py$")
        assert [f.relative_to(tmp_path).as_posix() for f in files] == ["api/users.py"]

    async def test_root_dot_dir_still_walked(self, tmp_path: Path) -> None:
        root = tmp_path / ".routes"
        _touch(root, "a.py")
        files = await discover_files(root, r"\.py$")
        assert len(files) == 1

    async def test_no_match_raises(self, tmp_path: Path) -> None:
        _touch(tmp_path, "readme.md")
        with pytest.raises(NoRoutesError):
            await discover_files(tmp_path, r"\.py$")

    async def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DiscoveryError) as exc_info:
            await discover_files(tmp_path / "missing", r"\.py$")
        assert "missing" in str(exc_info.value)

    async def test_missing_pattern_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Pattern is required"):
            await discover_files(tmp_path, None)

    async def test_unreadable_subdirectory_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        _touch(tmp_path, "ok/a.py", "locked/b.py")
        real_scan = discovery._scan

        async def scan(directory: Path):
            if directory.name == "locked":
                raise PermissionError("denied")
            return await real_scan(directory)

        monkeypatch.setattr(discovery, "_scan", scan)
        files = await discover_files(tmp_path, r"\.py$")
        assert [f.name for f in files] == ["a.py"]
        assert "locked" in caplog.text
