"""prism_router exception hierarchy.

Shared across discovery, extraction, synthesis, and the compiler driver so
every stage raises and catches the same types.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any


class PrismRouterError(Exception):
    """Base for all prism_router errors."""


class ConfigurationError(PrismRouterError):
    """Raised when compile configuration is missing or invalid.

    Also raised when no configuration file is found among the candidates.
    """


class RouteDefinitionError(PrismRouterError):
    """Raised by ``create_api_route`` for a malformed route declaration."""


class DiscoveryError(PrismRouterError):
    """The root directory of a route group could not be read."""


class NoRoutesError(PrismRouterError):
    """A pattern matched zero files, or zero routes survived extraction."""


class ExtractionError(PrismRouterError):
    """A route module failed to load or evaluate.

    Fatal when a single file is parsed directly.  The compiler driver
    downgrades it to a warning and skips the file.
    """

    def __init__(self, path: str | Path, cause: BaseException) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to parse route file {self.path}: {cause}")


class SynthesisError(PrismRouterError):
    """A structural schema could not be converted to TypeScript."""

    def __init__(self, message: str, schema: Any = None) -> None:
        self.schema = schema
        super().__init__(message)


class WriteError(PrismRouterError):
    """Creating the output directory or writing the client file failed."""

    def __init__(self, path: str | Path, cause: BaseException) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to write {self.path}: {cause}")


class CompilationError(PrismRouterError):
    """A compile stage failed.  The original error is kept in ``cause``."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Compilation failed: {cause}")


@dataclass(frozen=True, slots=True)
class HTTPError(PrismRouterError):
    """A dispatch-table lookup failure that maps to an HTTP status code."""

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no registered route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
