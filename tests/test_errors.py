"""Tests for prism_router.errors — exception hierarchy and error messages."""

from pathlib import Path

import pytest

from prism_router.errors import (
    CompilationError,
    ConfigurationError,
    DiscoveryError,
    ExtractionError,
    HTTPError,
    MethodNotAllowed,
    NoRoutesError,
    NotFound,
    PrismRouterError,
    RouteDefinitionError,
    SynthesisError,
    WriteError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            ConfigurationError,
            RouteDefinitionError,
            DiscoveryError,
            NoRoutesError,
            ExtractionError,
            SynthesisError,
            WriteError,
            CompilationError,
            HTTPError,
        ],
    )
    def test_is_prism_router_error(self, cls: type[Exception]) -> None:
        assert issubclass(cls, PrismRouterError)

    def test_not_found_is_http_error(self) -> None:
        assert issubclass(NotFound, HTTPError)

    def test_method_not_allowed_is_http_error(self) -> None:
        assert issubclass(MethodNotAllowed, HTTPError)


class TestMessages:
    def test_extraction_error(self) -> None:
        cause = SyntaxError("invalid syntax")
        err = ExtractionError(Path("/routes/users.py"), cause)
        assert err.path == "/routes/users.py"
        assert err.cause is cause
        assert str(err) == "Failed to parse route file /routes/users.py: invalid syntax"

    def test_compilation_error(self) -> None:
        cause = NoRoutesError("No routes found")
        err = CompilationError(cause)
        assert err.cause is cause
        assert str(err) == "Compilation failed: No routes found"

    def test_write_error(self) -> None:
        cause = PermissionError("denied")
        err = WriteError("out/Api.generated.ts", cause)
        assert str(err) == "Failed to write out/Api.generated.ts: denied"

    def test_synthesis_error_keeps_schema(self) -> None:
        err = SynthesisError("bad", schema={"type": "date"})
        assert err.schema == {"type": "date"}
        assert str(err) == "bad"


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad request body")) == "400: Bad request body"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]


class TestNotFound:
    def test_defaults(self) -> None:
        err = NotFound()
        assert err.status == 404
        assert err.detail == "Not Found"


class TestMethodNotAllowed:
    def test_allow_header(self) -> None:
        err = MethodNotAllowed(frozenset({"POST", "GET"}))
        assert err.status == 405
        assert err.headers == (("Allow", "GET, POST"),)
        assert "GET, POST" in err.detail

    def test_custom_detail(self) -> None:
        err = MethodNotAllowed(frozenset({"GET"}), detail="Use GET")
        assert err.detail == "Use GET"
