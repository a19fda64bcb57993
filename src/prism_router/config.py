"""Compile configuration.

CompilationConfig is a frozen dataclass, immutable after creation.  Config
files are plain Python modules that bind ``config`` (or ``default``) to
either a ``CompilationConfig`` or a mapping with the same fields.
"""

import importlib.util
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from prism_router.errors import ConfigurationError

# Searched in order, relative to the working directory
CONFIG_CANDIDATES: tuple[str, ...] = ("prism.config.py", "config.prism.router.py")

_NAME_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@dataclass(frozen=True, slots=True)
class RouteGroup:
    """One directory of route modules and the pattern selecting them."""

    directory: str | Path
    pattern: re.Pattern[str]
    prefix: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RouteGroup":
        directory = data.get("directory")
        if not directory:
            msg = "Route group is missing 'directory'"
            raise ConfigurationError(msg)
        pattern = data.get("pattern")
        if pattern is None:
            msg = f"Route group {directory!r} is missing 'pattern'"
            raise ConfigurationError(msg)
        options = data.get("options") or {}
        prefix = data.get("prefix", options.get("prefix", ""))
        return cls(directory=directory, pattern=_compile(pattern), prefix=prefix or "")


@dataclass(frozen=True, slots=True)
class CompilationConfig:
    """Compile configuration. Immutable after creation.

    ``output_dir`` and ``name`` are required; the client is written to
    ``<output_dir>/<name>.generated.ts`` and exported as ``create<name>``::

        config = CompilationConfig(
            output_dir="generated",
            name="ApiClient",
            base_url="http://localhost:8000",
            routes=(RouteGroup("api", re.compile(r"\\.py$")),),
        )
    """

    output_dir: str | Path = ""
    name: str = ""
    base_url: str = ""
    routes: tuple[RouteGroup, ...] = field(default_factory=tuple)

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir) / f"{self.name}.generated.ts"

    def validate(self) -> None:
        """Raise ``ConfigurationError`` unless required fields are present."""
        if not self.output_dir:
            msg = "output_dir is required"
            raise ConfigurationError(msg)
        if not self.name:
            msg = "name is required"
            raise ConfigurationError(msg)
        if not _NAME_RE.match(self.name):
            msg = f"name must be a valid identifier, got {self.name!r}"
            raise ConfigurationError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CompilationConfig":
        """Build a config from snake_case or camelCase keys.

        ``routes`` may be a single group mapping or a list of them.
        """
        groups = data.get("routes") or ()
        if isinstance(groups, (Mapping, RouteGroup)):
            groups = (groups,)
        return cls(
            output_dir=data.get("output_dir", data.get("outputDir", "")) or "",
            name=data.get("name", "") or "",
            base_url=data.get("base_url", data.get("baseUrl", "")) or "",
            routes=tuple(g if isinstance(g, RouteGroup) else RouteGroup.from_mapping(g) for g in groups),
        )

    @classmethod
    def coerce(cls, value: Any) -> "CompilationConfig":
        if isinstance(value, CompilationConfig):
            return value
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        msg = f"Expected a CompilationConfig or mapping, got {type(value).__name__}"
        raise ConfigurationError(msg)


def load_config(path: str | Path | None = None, cwd: str | Path | None = None) -> CompilationConfig:
    """Load the compile configuration from a Python config file.

    With no *path*, the first of :data:`CONFIG_CANDIDATES` that exists in
    *cwd* (default: the working directory) is used.

    Raises ``ConfigurationError`` when no file is found or it fails to load.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    if path is not None:
        config_file = base / path
        if not config_file.is_file():
            msg = f"Configuration file not found: {config_file}"
            raise ConfigurationError(msg)
    else:
        found = [base / name for name in CONFIG_CANDIDATES if (base / name).is_file()]
        if not found:
            names = "\n".join(f"  - {name}" for name in CONFIG_CANDIDATES)
            msg = f"No configuration file found. Please create one of:\n{names}"
            raise ConfigurationError(msg)
        config_file = found[0]

    spec = importlib.util.spec_from_file_location("_prism_config", config_file)
    if spec is None or spec.loader is None:
        msg = f"Cannot load configuration file {config_file}"
        raise ConfigurationError(msg)
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        msg = f"Failed to load configuration file {config_file}: {exc}"
        raise ConfigurationError(msg) from exc

    value = getattr(module, "config", None)
    if value is None:
        value = getattr(module, "default", None)
    if value is None:
        msg = f"{config_file} does not define 'config'"
        raise ConfigurationError(msg)
    return CompilationConfig.coerce(value)


def _compile(pattern: Any) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except (re.error, TypeError) as exc:
        msg = f"Invalid route pattern {pattern!r}: {exc}"
        raise ConfigurationError(msg) from exc
