"""Registered dispatch table with trie-based path matching.

Each compile session registers its extracted routes here.  Serving
traffic is left to whatever dispatch layer consumes the table.
"""

import logging
import re

from prism_router.errors import MethodNotAllowed, NotFound
from prism_router.routing.params import join_prefix, parse_path, path_params, segment_pattern
from prism_router.routing.route import ApiRoute, RouteMatch

logger = logging.getLogger("prism_router.routing")


class _TrieNode:
    """A node in the route trie."""

    __slots__ = ("children", "param_child", "pattern_children", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Segments mixing text and placeholders: "{name}.json" -> (regex, node)
        self.pattern_children: dict[str, tuple[re.Pattern[str], _TrieNode]] = {}
        # Whole-segment parameter child, shared by every placeholder name
        self.param_child: _TrieNode | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, ApiRoute] = {}


class RouteTable:
    """Dispatch table keyed by path segments and HTTP method.

    Usage::

        table = RouteTable()
        table.add(route, prefix="/v1")
        match = table.match("GET", "/v1/users/42")
    """

    __slots__ = ("_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[ApiRoute] = []

    def add(self, route: ApiRoute, prefix: str = "") -> ApiRoute:
        """Register *route* under ``prefix + route.path``.

        Returns the registered route, whose path includes the prefix.
        A later registration for the same method and path replaces the
        dispatch entry.
        """
        if prefix:
            route = route.with_path(join_prefix(prefix, route.path))

        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param:
                if node.param_child is None:
                    node.param_child = _TrieNode()
                node = node.param_child
            elif path_params(seg.value):
                if seg.value not in node.pattern_children:
                    node.pattern_children[seg.value] = (segment_pattern(seg.value), _TrieNode())
                node = node.pattern_children[seg.value][1]
            else:
                if seg.value not in node.children:
                    node.children[seg.value] = _TrieNode()
                node = node.children[seg.value]

        node.routes_by_method[route.method] = route
        self._routes.append(route)
        logger.debug("Registered route %s %s", route.method, route.path)
        return route

    @property
    def routes(self) -> list[ApiRoute]:
        """Return all registered routes in registration order."""
        return list(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against registered routes.

        Returns a ``RouteMatch`` on success.  Parameter names come from the
        matched route's own path, so routes sharing a trie level may name
        their parameters differently.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.split("/") if p]
        node = self._match_node(self._root, parts, 0)

        if node is None:
            raise NotFound(f"No route matches {method} {path!r}")

        method = method.upper()
        if method in node.routes_by_method:
            route = node.routes_by_method[method]
            return RouteMatch(route=route, path_params=_capture(route, parts))

        raise MethodNotAllowed(frozenset(node.routes_by_method))

    def _match_node(self, node: _TrieNode, parts: list[str], index: int) -> _TrieNode | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            if node.routes_by_method:
                return node
            return None

        part = parts[index]

        # Static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1)
            if result is not None:
                return result

        for pattern, child in node.pattern_children.values():
            if pattern.fullmatch(part):
                result = self._match_node(child, parts, index + 1)
                if result is not None:
                    return result

        if node.param_child is not None:
            return self._match_node(node.param_child, parts, index + 1)

        return None


def _capture(route: ApiRoute, parts: list[str]) -> dict[str, str]:
    """Map *route*'s placeholder names to the matched request path parts."""
    params: dict[str, str] = {}
    for seg, part in zip(parse_path(route.path), parts, strict=True):
        if seg.is_param:
            params[seg.param_name or ""] = part
            continue
        names = path_params(seg.value)
        if names:
            match = segment_pattern(seg.value).fullmatch(part)
            if match is not None:
                params.update(zip(names, match.groups(), strict=True))
    return params
