"""Compiler driver.

Orchestrates one compile: discovery and extraction for every configured
route group, client tree construction, assembly, and a single atomic
write of ``<output_dir>/<name>.generated.ts``.
"""

import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

import anyio
import anyio.to_thread

from prism_router.compilation.assembler import assemble_client
from prism_router.compilation.session import CompileSession
from prism_router.compilation.tree import build_client_tree
from prism_router.config import CompilationConfig
from prism_router.errors import CompilationError, NoRoutesError, WriteError
from prism_router.routing.route import ApiRoute

logger = logging.getLogger("prism_router.compiler")


def render_client(
    routes: Iterable[ApiRoute],
    name: str,
    base_url: str = "",
    session: CompileSession | None = None,
) -> str:
    """Return the client source for an already-deduplicated route list.

    Raises ``NoRoutesError`` when *routes* is empty.
    """
    routes = list(routes)
    if not routes:
        msg = "No routes found"
        raise NoRoutesError(msg)
    session = session or CompileSession()
    tree = build_client_tree(routes, session.emitter().emit)
    return assemble_client(tree, name, base_url)


async def compile_client(config: CompilationConfig) -> Path:
    """Compile the client described by *config* and write it to disk.

    Returns the path of the generated file.

    Raises:
        ConfigurationError: ``output_dir`` or ``name`` is missing.
        CompilationError: Any stage failed; the stage's error is in
            ``cause``.  No output file is written in that case.
    """
    config.validate()
    session = CompileSession()
    output_dir = anyio.Path(config.output_dir)

    try:
        try:
            await output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(config.output_dir, exc) from exc

        for group in config.routes:
            added = await session.load_group(group)
            logger.info("Loaded %d route(s) from %s", added, group.directory)

        routes = session.routes
        if not routes:
            msg = "No routes found"
            raise NoRoutesError(msg)

        source = render_client(routes, config.name, config.base_url, session)
        await anyio.to_thread.run_sync(_write_atomic, config.output_path, source)
    except Exception as exc:
        raise CompilationError(exc) from exc

    logger.info(
        "Generated %s (%d routes, %d file(s) skipped)",
        config.output_path,
        len(routes),
        len(session.skipped_files),
    )
    return config.output_path


def _write_atomic(path: Path, source: str) -> None:
    """Write *source* to a sibling temp file, then move it over *path*."""
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(source)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise WriteError(path, exc) from exc
