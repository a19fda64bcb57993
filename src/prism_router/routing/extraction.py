"""Route extraction from loaded route modules.

A route module exposes its routes in one or more export shapes:

``FLAT_NAMED_EXPORTS``
    Routes bound to public module-level names (anything but ``default``).
``SINGLE_DEFAULT_ROUTE``
    ``default`` is itself a route.
``DOUBLE_NESTED_DEFAULT``
    ``default.default`` is a route (one extra level of wrapping).
``WRAPPED_DEFAULT_MAP``
    ``default`` is a container whose members are routes.

:func:`classify_exports` tags a namespace with the shapes it exhibits and
:func:`extract_from_namespace` applies one rule per shape, always in the
order above.  Routes are deduplicated by ``"<METHOD>:<path>"``; the first
occurrence wins and later ones are dropped without comment.
"""

import enum
import importlib.util
import itertools
import logging
import sys
import types
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

from prism_router.errors import ExtractionError, RouteDefinitionError
from prism_router.routing.route import ApiRoute, is_route_shape

logger = logging.getLogger("prism_router.extraction")

DEFAULT_EXPORT = "default"

_module_counter = itertools.count()


class ModuleShape(enum.Enum):
    """Recognized export shapes, in processing order."""

    FLAT_NAMED_EXPORTS = "flat_named_exports"
    SINGLE_DEFAULT_ROUTE = "single_default_route"
    DOUBLE_NESTED_DEFAULT = "double_nested_default"
    WRAPPED_DEFAULT_MAP = "wrapped_default_map"


def load_module_namespace(path: str | Path) -> dict[str, Any]:
    """Execute the module at *path* and return its public export namespace.

    Every call executes the file afresh under a unique module name.  The
    namespace is ``__all__`` when the module defines it, otherwise every
    attribute whose name does not start with ``_``.

    Raises ``ExtractionError`` wrapping whatever the module raised.
    """
    file = Path(path)
    module_name = f"_prism_routes_{file.stem.replace('.', '_')}_{next(_module_counter)}"
    try:
        spec = importlib.util.spec_from_file_location(module_name, file)
        if spec is None or spec.loader is None:
            msg = f"Not a loadable Python module: {file}"
            raise ImportError(msg)
        module = importlib.util.module_from_spec(spec)
        # Registered while executing so dataclasses and pickling can resolve it
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        finally:
            sys.modules.pop(module_name, None)
    except Exception as exc:
        raise ExtractionError(file, exc) from exc

    return _public_namespace(module)


def extract_routes(path: str | Path) -> list[ApiRoute]:
    """Load the module at *path* and return its deduplicated routes.

    Raises ``ExtractionError`` if the module fails to load or declares a
    malformed route.
    """
    namespace = load_module_namespace(path)
    try:
        routes = extract_from_namespace(namespace)
    except RouteDefinitionError as exc:
        raise ExtractionError(path, exc) from exc
    logger.debug("Extracted %d route(s) from %s", len(routes), path)
    return routes


def classify_exports(namespace: Mapping[str, Any]) -> list[ModuleShape]:
    """Return the export shapes present in *namespace*, in processing order."""
    shapes: list[ModuleShape] = []
    if any(is_route_shape(value) for value in _flat_exports(namespace)):
        shapes.append(ModuleShape.FLAT_NAMED_EXPORTS)

    default = namespace.get(DEFAULT_EXPORT)
    if default is None:
        return shapes
    if is_route_shape(default):
        shapes.append(ModuleShape.SINGLE_DEFAULT_ROUTE)
        return shapes
    if not _is_container(default):
        return shapes

    if is_route_shape(_member(default, DEFAULT_EXPORT)):
        shapes.append(ModuleShape.DOUBLE_NESTED_DEFAULT)
    if any(is_route_shape(value) for value in _wrapped_exports(default)):
        shapes.append(ModuleShape.WRAPPED_DEFAULT_MAP)
    return shapes


def extract_from_namespace(namespace: Mapping[str, Any]) -> list[ApiRoute]:
    """Apply the extraction rule for each shape *namespace* exhibits.

    Raises ``RouteDefinitionError`` for a route-shaped value that
    ``ApiRoute.coerce`` rejects.
    """
    seen: dict[str, ApiRoute] = {}
    for shape in classify_exports(namespace):
        for value in _RULES[shape](namespace):
            if not is_route_shape(value):
                continue
            route = ApiRoute.coerce(value)
            seen.setdefault(route.key, route)
    return list(seen.values())


# ---------------------------------------------------------------------------
# Extraction rules, one per shape
# ---------------------------------------------------------------------------


def _flat_exports(namespace: Mapping[str, Any]) -> Iterator[Any]:
    for name, value in namespace.items():
        if name != DEFAULT_EXPORT:
            yield value


def _single_default(namespace: Mapping[str, Any]) -> Iterator[Any]:
    yield namespace[DEFAULT_EXPORT]


def _double_nested_default(namespace: Mapping[str, Any]) -> Iterator[Any]:
    yield _member(namespace[DEFAULT_EXPORT], DEFAULT_EXPORT)


def _wrapped_default_map(namespace: Mapping[str, Any]) -> Iterator[Any]:
    yield from _wrapped_exports(namespace[DEFAULT_EXPORT])


_RULES: dict[ModuleShape, Callable[[Mapping[str, Any]], Iterator[Any]]] = {
    ModuleShape.FLAT_NAMED_EXPORTS: _flat_exports,
    ModuleShape.SINGLE_DEFAULT_ROUTE: _single_default,
    ModuleShape.DOUBLE_NESTED_DEFAULT: _double_nested_default,
    ModuleShape.WRAPPED_DEFAULT_MAP: _wrapped_default_map,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _public_namespace(module: types.ModuleType) -> dict[str, Any]:
    exported = getattr(module, "__all__", None)
    if exported is not None:
        return {name: getattr(module, name) for name in exported if hasattr(module, name)}
    return {name: value for name, value in vars(module).items() if not name.startswith("_")}


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, types.SimpleNamespace, types.ModuleType))


def _container_items(value: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(value, Mapping):
        yield from value.items()
    elif isinstance(value, types.ModuleType):
        yield from _public_namespace(value).items()
    else:
        yield from vars(value).items()


def _member(container: Any, name: str) -> Any:
    for key, value in _container_items(container):
        if key == name:
            return value
    return None


def _wrapped_exports(container: Any) -> Iterator[Any]:
    for key, value in _container_items(container):
        if key != DEFAULT_EXPORT:
            yield value
