"""Route definition frozen dataclasses.

An ``ApiRoute`` is created once per route-module evaluation and lives for
one compile.  The handler is carried as an opaque reference; nothing in the
compiler ever calls it.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from prism_router.errors import RouteDefinitionError
from prism_router.routing.schema import to_schema

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"})


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class RequestSchema:
    """Structural schemas for the request components a route accepts."""

    query: dict[str, Any] | None = None
    body: dict[str, Any] | None = None
    headers: dict[str, Any] | None = None

    @classmethod
    def coerce(cls, value: Any) -> "RequestSchema | None":
        if value is None or isinstance(value, RequestSchema):
            return value
        return cls(
            query=to_schema(_read(value, "query")),
            body=to_schema(_read(value, "body")),
            headers=to_schema(_read(value, "headers")),
        )


@dataclass(frozen=True, slots=True)
class ResponseSchema:
    """Structural schemas for one declared response status."""

    body: dict[str, Any] | None = None
    headers: dict[str, Any] | None = None
    content_type: str | None = None

    @classmethod
    def coerce(cls, value: Any) -> "ResponseSchema":
        if isinstance(value, ResponseSchema):
            return value
        if value is None:
            return cls()
        content_type = _read(value, "content_type")
        if content_type is None:
            content_type = _read(value, "contentType")
        return cls(
            body=to_schema(_read(value, "body")),
            headers=to_schema(_read(value, "headers")),
            content_type=content_type,
        )


@dataclass(frozen=True, slots=True)
class ApiRoute:
    """A frozen route definition.

    ``path`` uses ``{name}`` placeholders for path parameters.  ``response``
    maps status codes to their declared schemas, in declaration order.
    """

    path: str
    method: str
    handler: Callable[..., Any]
    request: RequestSchema | None = None
    response: dict[int, ResponseSchema] = field(default_factory=dict)
    auth: Any = None

    @property
    def key(self) -> str:
        """Deduplication key: ``"<METHOD>:<path>"``."""
        return f"{self.method}:{self.path}"

    def with_path(self, path: str) -> "ApiRoute":
        return ApiRoute(
            path=path,
            method=self.method,
            handler=self.handler,
            request=self.request,
            response=self.response,
            auth=self.auth,
        )

    @classmethod
    def coerce(cls, value: Any) -> "ApiRoute":
        """Normalize any value satisfying the route shape into an ApiRoute.

        Mappings and arbitrary objects are read by key or attribute.
        Schema components given as Python annotations are converted to
        JSON Schema here.

        Raises ``RouteDefinitionError`` unless the value passes the same
        checks as ``create_api_route`` and its response keys are integer
        status codes.
        """
        if isinstance(value, ApiRoute):
            return value
        if not is_route_shape(value):
            msg = f"{value!r} is not a route definition"
            raise RouteDefinitionError(msg)

        path = _read(value, "path")
        method = _read(value, "method")
        handler = _read(value, "handler")
        _validate_definition(path, method, handler)

        response = _read(value, "response") or {}
        if not isinstance(response, Mapping):
            msg = f"Response of {method.upper()} {path} must map status codes to schemas"
            raise RouteDefinitionError(msg)
        return cls(
            path=path,
            method=method.upper(),
            handler=handler,
            request=RequestSchema.coerce(_read(value, "request")),
            response={
                _status_code(status, path): ResponseSchema.coerce(spec) for status, spec in response.items()
            },
            auth=_read(value, "auth"),
        )


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful dispatch-table match."""

    route: ApiRoute
    path_params: dict[str, str]


def is_route_shape(value: Any) -> bool:
    """Return True when *value* has a string path, a string method and a callable handler."""
    if value is None or isinstance(value, type):
        return False
    return (
        isinstance(_read(value, "path"), str)
        and isinstance(_read(value, "method"), str)
        and callable(_read(value, "handler"))
    )


def create_api_route(
    *,
    path: str,
    method: str,
    handler: Callable[..., Any],
    request: Mapping[str, Any] | RequestSchema | None = None,
    response: Mapping[int, Any] | None = None,
    auth: Any = None,
) -> ApiRoute:
    """Declare a route.  Used at module level in route files::

        get_user = create_api_route(
            path="/api/users/{id}",
            method="GET",
            response={200: {"content_type": "application/json", "body": User}},
            handler=get_user_handler,
        )
    """
    _validate_definition(path, method, handler)
    return ApiRoute.coerce(
        {
            "path": path,
            "method": method,
            "handler": handler,
            "request": request,
            "response": response,
            "auth": auth,
        }
    )


def _validate_definition(path: Any, method: Any, handler: Any) -> None:
    if not isinstance(path, str) or not path.startswith("/"):
        msg = f"Route path must start with '/': {path!r}"
        raise RouteDefinitionError(msg)
    if "<" in path or ":" in path:
        msg = f"Route path {path!r} must use {{param}} placeholders, not <param> or :param"
        raise RouteDefinitionError(msg)
    if not isinstance(method, str) or method.upper() not in HTTP_METHODS:
        allowed = ", ".join(sorted(HTTP_METHODS))
        msg = f"Unsupported HTTP method {method!r}. Expected one of: {allowed}"
        raise RouteDefinitionError(msg)
    if not callable(handler):
        msg = f"Handler for {method.upper()} {path} must be callable"
        raise RouteDefinitionError(msg)


def _status_code(status: Any, path: str) -> int:
    try:
        return int(status)
    except (TypeError, ValueError) as exc:
        msg = f"Response status of {path} must be an integer status code, got {status!r}"
        raise RouteDefinitionError(msg) from exc


def _read(value: Any, name: str) -> Any:
    """Read *name* by key from mappings, by attribute from anything else."""
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)
