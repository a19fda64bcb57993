"""Filesystem discovery of route modules.

Walks a route group's directory tree and collects every file whose
slash-normalized absolute path matches the group's pattern.

Sibling subdirectories are listed concurrently.  Because deduplication
downstream is first-seen-wins, the collected paths are always returned
sorted lexicographically by their slash-normalized form, never in the
order the filesystem happened to yield them.
"""

import logging
import os
import re
from pathlib import Path

import anyio
import anyio.to_thread

from prism_router.errors import ConfigurationError, DiscoveryError, NoRoutesError

logger = logging.getLogger("prism_router.discovery")

# Directory names never descended into, besides dot-directories
EXCLUDED_DIRS = frozenset({"node_modules", "__pycache__"})


async def discover_files(directory: str | Path, pattern: re.Pattern[str] | str | None) -> list[Path]:
    """Return absolute paths of all files under *directory* matching *pattern*.

    Args:
        directory: Root of the route group.
        pattern: Regular expression searched against each file's
            absolute path with ``/`` separators.

    Raises:
        ConfigurationError: *pattern* is missing.
        DiscoveryError: *directory* cannot be read.
        NoRoutesError: No file matched.
    """
    if pattern is None:
        msg = "Pattern is required"
        raise ConfigurationError(msg)
    if isinstance(pattern, str):
        pattern = re.compile(pattern)

    root = Path(directory).resolve()
    try:
        entries = await _scan(root)
    except OSError as exc:
        msg = f"Cannot read route directory {root}: {exc}"
        raise DiscoveryError(msg) from exc

    matched: list[str] = []
    await _walk(entries, pattern, matched)

    if not matched:
        msg = f"No files under {root} match pattern {pattern.pattern!r}"
        raise NoRoutesError(msg)

    matched.sort()
    logger.info("Discovered %d route file(s) under %s", len(matched), root)
    return [Path(p) for p in matched]


async def _walk(entries: list[tuple[str, bool, bool]], pattern: re.Pattern[str], matched: list[str]) -> None:
    """Collect matching files from *entries* and recurse into subdirectories.

    Each subdirectory is listed in its own task.  Unreadable
    subdirectories are logged and skipped.
    """
    subdirs: list[str] = []
    for path, is_dir, is_file in entries:
        if is_dir:
            name = os.path.basename(path)
            if name.startswith(".") or name in EXCLUDED_DIRS:
                continue
            subdirs.append(path)
        elif is_file and pattern.search(_normalize(path)):
            matched.append(_normalize(path))

    async def visit(subdir: str) -> None:
        try:
            children = await _scan(Path(subdir))
        except OSError as exc:
            logger.warning("Skipping unreadable directory %s: %s", subdir, exc)
            return
        await _walk(children, pattern, matched)

    async with anyio.create_task_group() as tg:
        for subdir in subdirs:
            tg.start_soon(visit, subdir)


async def _scan(directory: Path) -> list[tuple[str, bool, bool]]:
    """List *directory* in a worker thread as ``(path, is_dir, is_file)`` tuples."""

    def scan() -> list[tuple[str, bool, bool]]:
        with os.scandir(directory) as it:
            return [
                (entry.path, entry.is_dir(follow_symlinks=False), entry.is_file())
                for entry in it
            ]

    return await anyio.to_thread.run_sync(scan)


def _normalize(path: str) -> str:
    return path.replace("\\", "/")
