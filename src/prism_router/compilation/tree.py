"""Client tree construction.

Groups the flat route list into a tree mirroring URL path segments::

    GET  /api/users        -> api.users.get
    POST /api/users        -> api.users.post
    GET  /api/users/{id}   -> api.users._id_.get

Parameter segments are keyed ``_<name>_``.  Literal segments that could be
mistaken for one are escaped with a ``$`` prefix (``/a/_id_`` -> ``a.$_id_``),
so a parameter never shares a key with a literal segment.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from prism_router.routing.params import parse_path
from prism_router.routing.route import ApiRoute, PathSegment


@dataclass(slots=True)
class ClientNode:
    """One path segment of the client tree.

    ``methods`` maps lowercase HTTP method to emitted method source and is
    non-empty only where a route ends.  ``children`` keeps insertion order.
    """

    children: dict[str, "ClientNode"] = field(default_factory=dict)
    methods: dict[str, str] = field(default_factory=dict)

    @property
    def is_leaf(self) -> bool:
        return bool(self.methods)

    def child(self, key: str) -> "ClientNode":
        """Get or create the child node for *key*."""
        node = self.children.get(key)
        if node is None:
            node = self.children[key] = ClientNode()
        return node

    def leaves(self, prefix: tuple[str, ...] = ()) -> Iterable[tuple[tuple[str, ...], str]]:
        """Yield ``(key path, method)`` for every emitted method, depth-first."""
        for method in self.methods:
            yield prefix, method
        for key, node in self.children.items():
            yield from node.leaves((*prefix, key))


def segment_key(segment: PathSegment) -> str:
    """Return the tree key for one path segment.

    A parameter segment ``{id}`` becomes ``_id_``.  A literal that starts
    with ``$``, or starts and ends with ``_``, gets a ``$`` prefix, so no
    literal key ever equals a parameter key or another literal's key.
    """
    if segment.is_param:
        return f"_{segment.param_name}_"
    value = segment.value
    if value.startswith("$") or (value.startswith("_") and value.endswith("_")):
        return "$" + value
    return value


def build_client_tree(routes: Iterable[ApiRoute], emit: Callable[[ApiRoute], str]) -> ClientNode:
    """Build the client tree for *routes*.

    *emit* renders one route's method source.  Routes are expected to be
    deduplicated already; a repeated ``(path, method)`` replaces the
    earlier method text.
    """
    root = ClientNode()
    for route in routes:
        node = root
        for segment in parse_path(route.path):
            node = node.child(segment_key(segment))
        node.methods[route.method.lower()] = emit(route)
    return root
