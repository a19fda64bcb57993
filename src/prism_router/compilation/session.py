"""Per-invocation compile state.

A ``CompileSession`` is created by every call to ``compile_client`` and
threaded through discovery, extraction, and emission.  Nothing here is
shared between sessions, so concurrent or repeated compiles never see
each other's routes.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import anyio.to_thread

from prism_router.compilation.emitter import MethodEmitter
from prism_router.compilation.synthesizer import TypeSynthesizer
from prism_router.config import RouteGroup
from prism_router.errors import ExtractionError
from prism_router.routing.discovery import discover_files
from prism_router.routing.extraction import extract_routes
from prism_router.routing.params import join_prefix
from prism_router.routing.route import ApiRoute
from prism_router.routing.table import RouteTable

logger = logging.getLogger("prism_router.compiler")


@dataclass(slots=True)
class CompileSession:
    """Routes, dispatch table, and type cache for one compile."""

    table: RouteTable = field(default_factory=RouteTable)
    synthesizer: TypeSynthesizer = field(default_factory=TypeSynthesizer)
    skipped_files: list[tuple[Path, ExtractionError]] = field(default_factory=list)
    _routes: dict[str, ApiRoute] = field(default_factory=dict)

    @property
    def routes(self) -> list[ApiRoute]:
        """The merged route list in first-seen order."""
        return list(self._routes.values())

    def emitter(self) -> MethodEmitter:
        return MethodEmitter(self.synthesizer)

    def add_route(self, route: ApiRoute, prefix: str = "") -> bool:
        """Register *route* and keep it unless its key was already seen.

        Returns False for a dropped duplicate.  The first definition of a
        ``(method, path)`` pair wins even if a later one differs.
        """
        if prefix:
            route = route.with_path(join_prefix(prefix, route.path))
        if route.key in self._routes:
            logger.debug("Ignoring duplicate route %s", route.key)
            return False
        self._routes[route.key] = self.table.add(route)
        return True

    async def load_group(self, group: RouteGroup) -> int:
        """Discover and extract every route file of *group*.

        Files are loaded one at a time in a worker thread, in discovery
        order.  Files that fail to load are logged and skipped; discovery
        failures propagate.  Returns the number of routes added.
        """
        logger.info("Loading routes from %s with pattern %s", group.directory, group.pattern.pattern)
        added = 0
        for path in await discover_files(group.directory, group.pattern):
            try:
                routes = await anyio.to_thread.run_sync(extract_routes, path)
            except ExtractionError as exc:
                logger.warning("Skipping route file %s: %s", path, exc.cause)
                self.skipped_files.append((path, exc))
                continue
            for route in routes:
                added += self.add_route(route, group.prefix)
        return added
