"""prism_router — typed client compiler for file-based API routes.

Route modules declare routes with ``create_api_route``; the compiler
discovers them, deduplicates them, and writes one TypeScript client whose
methods mirror the URL tree.

Basic usage::

    from prism_router import create_api_route

    get_user = create_api_route(
        path="/api/users/{id}",
        method="GET",
        response={200: {"content_type": "application/json", "body": User}},
        handler=get_user_handler,
    )

Compile::

    import re

    import anyio
    from prism_router import CompilationConfig, RouteGroup, compile_client

    config = CompilationConfig(
        output_dir="generated",
        name="ApiClient",
        routes=(RouteGroup("api", re.compile(r"\\.py$")),),
    )
    anyio.run(compile_client, config)
"""

__version__ = "0.1.0"
__all__ = [
    "ApiRoute",
    "CompilationConfig",
    "CompilationError",
    "CompileSession",
    "ConfigurationError",
    "DiscoveryError",
    "ExtractionError",
    "NoRoutesError",
    "PrismRouterError",
    "RouteDefinitionError",
    "RouteGroup",
    "RouteTable",
    "SynthesisError",
    "WriteError",
    "compile_client",
    "create_api_route",
    "load_config",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps route modules that only need ``create_api_route`` from pulling in
    the compiler and its template engine.
    """
    if name in ("ApiRoute", "create_api_route"):
        from prism_router.routing import route as _route

        return getattr(_route, name)

    if name == "RouteTable":
        from prism_router.routing.table import RouteTable

        return RouteTable

    if name in ("CompilationConfig", "RouteGroup", "load_config"):
        from prism_router import config as _config

        return getattr(_config, name)

    if name == "compile_client":
        from prism_router.compilation.compiler import compile_client

        return compile_client

    if name == "CompileSession":
        from prism_router.compilation.session import CompileSession

        return CompileSession

    if name in (
        "CompilationError",
        "ConfigurationError",
        "DiscoveryError",
        "ExtractionError",
        "NoRoutesError",
        "PrismRouterError",
        "RouteDefinitionError",
        "SynthesisError",
        "WriteError",
    ):
        from prism_router import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
