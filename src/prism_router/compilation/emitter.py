"""Client method emission.

Turns one ``ApiRoute`` into the TypeScript source of one async client
method: a ``key: async (...) => {...}`` property ready to be placed in an
object literal.  The emitted body validates path parameters, builds the
URL and query string, runs the caller's interceptors, performs the fetch,
and returns the ``{status, body, headers}`` envelope.

Emitted text is indented relative to column zero; the assembler shifts it
to its depth in the client tree.
"""

import re

from prism_router.compilation.synthesizer import TypeSynthesizer
from prism_router.routing.params import PLACEHOLDER_RE, path_params
from prism_router.routing.route import ApiRoute

INDENT = "  "

# Locals and globals the emitted method body refers to, plus TypeScript
# reserved words
_RESERVED = frozenset(
    {
        "baseUrl", "body", "init", "interceptors", "options", "queryString",
        "response", "searchParams", "url", "key", "value", "interceptor",
        "fetch", "encodeURIComponent", "URLSearchParams", "String", "Object",
        "JSON", "Error", "RequestInit", "Response", "Promise",
        "isJsonContentType", "JSON_CONTENT_TYPES",
        "break", "case", "catch", "class", "const", "continue", "debugger",
        "default", "delete", "do", "else", "enum", "export", "extends", "false",
        "finally", "for", "function", "if", "import", "in", "instanceof", "let",
        "new", "null", "return", "super", "switch", "this", "throw", "true",
        "try", "typeof", "var", "void", "while", "with", "yield", "await",
        "undefined",
    }
)  # fmt: skip

_NON_IDENT_RE = re.compile(r"[^A-Za-z0-9_$]")


def param_identifier(name: str) -> str:
    """Return a TypeScript identifier for the path parameter *name*."""
    ident = _NON_IDENT_RE.sub("_", name) or "_"
    if ident[0].isdigit():
        ident = "_" + ident
    if ident in _RESERVED:
        ident += "_"
    return ident


def param_identifiers(path: str) -> dict[str, str]:
    """Map each distinct placeholder name of *path* to a unique identifier.

    Names that sanitize to the same identifier (``a-b`` and ``a_b``) are
    told apart by extra trailing underscores, in path order.
    """
    idents: dict[str, str] = {}
    used: set[str] = set()
    for name in dict.fromkeys(path_params(path)):
        ident = param_identifier(name)
        while ident in used or ident in _RESERVED:
            ident += "_"
        used.add(ident)
        idents[name] = ident
    return idents


def ts_string(value: str) -> str:
    """Render *value* as a single-quoted TypeScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


class MethodEmitter:
    """Emits client method source for routes of one compile session."""

    __slots__ = ("_types",)

    def __init__(self, synthesizer: TypeSynthesizer) -> None:
        self._types = synthesizer

    def emit(self, route: ApiRoute) -> str:
        """Return the method property source for *route*."""
        params = list(param_identifiers(route.path).items())
        fragments = self._types.request_fragments(route)
        response_union = self._types.response_union(route)

        lines: list[str] = [f"{route.method.lower()}: async ("]
        lines.extend(f"{INDENT}{line}," for line in self._parameters(params, fragments))
        lines.append(f"): Promise<{response_union}> => {{")
        lines.extend(INDENT + line if line else line for line in self._body(route, params, fragments, response_union))
        lines.append("}")
        return "\n".join(lines)

    # -- signature ---------------------------------------------------------

    def _parameters(self, params: list[tuple[str, str]], fragments: dict[str, str]) -> list[str]:
        result = [f"{ident}: string" for _, ident in params]

        members: list[str] = []
        if "query" in fragments:
            members.append(f"query?: {fragments['query']}")
        if "body" in fragments:
            members.append(f"body: {fragments['body']}")
        if "headers" in fragments:
            members.append(f"headers?: {fragments['headers']}")

        if members:
            marker = "" if "body" in fragments else "?"
            result.append(f"options{marker}: {{ {'; '.join(members)} }}")
        elif not params:
            result.append("options?: {}")
        return result

    # -- body --------------------------------------------------------------

    def _body(
        self,
        route: ApiRoute,
        params: list[tuple[str, str]],
        fragments: dict[str, str],
        response_union: str,
    ) -> list[str]:
        lines: list[str] = []
        for name, ident in params:
            message = ts_string(f'Path parameter "{name}" is required')
            lines += [
                f"if (!{ident}) {{",
                f"{INDENT}throw new Error({message});",
                "}",
            ]

        lines.append(f"let url = `${{baseUrl}}{_url_template(route.path, dict(params))}`;")

        if "query" in fragments:
            lines += [
                "const searchParams = new URLSearchParams();",
                "for (const [key, value] of Object.entries(options?.query ?? {})) {",
                f"{INDENT}if (value !== undefined && value !== null) {{",
                f"{INDENT * 2}searchParams.append(key, String(value));",
                f"{INDENT}}}",
                "}",
                "const queryString = searchParams.toString();",
                "if (queryString) {",
                f"{INDENT}url += `?${{queryString}}`;",
                "}",
            ]

        lines += ["let init: RequestInit = {", f"{INDENT}method: {ts_string(route.method)},"]
        header_entries: list[str] = []
        if "body" in fragments:
            header_entries.append("'Content-Type': 'application/json',")
        if "headers" in fragments:
            header_entries.append("...(options?.headers ?? {}),")
        if header_entries:
            lines.append(f"{INDENT}headers: {{")
            lines.extend(f"{INDENT * 2}{entry}" for entry in header_entries)
            lines.append(f"{INDENT}}},")
        if "body" in fragments:
            lines.append(f"{INDENT}body: JSON.stringify(options.body),")
        lines.append("};")

        lines += [
            "for (const interceptor of interceptors) {",
            f"{INDENT}init = (await interceptor(init)) ?? init;",
            "}",
            "const response = await fetch(url, init);",
        ]

        if route.response:
            statuses = ", ".join(str(status) for status in route.response)
            lines += [
                f"if (![{statuses}].includes(response.status)) {{",
                f"{INDENT}throw new Error(`Unexpected status code: ${{response.status}}. Expected one of: {statuses}`);",
                "}",
            ]

        lines += [
            "const body = isJsonContentType(response.headers.get('content-type'))",
            f"{INDENT}? await response.json()",
            f"{INDENT}: response;",
            "return {",
            f"{INDENT}status: response.status,",
            f"{INDENT}body,",
            f"{INDENT}headers: Object.fromEntries(response.headers.entries()),",
            f"}} as unknown as {response_union};",
        ]
        return lines


def _url_template(path: str, idents: dict[str, str]) -> str:
    """Render *path* as template-literal text with every placeholder substituted."""
    pieces = PLACEHOLDER_RE.split(path)
    # split() alternates literal text and captured placeholder names
    return "".join(
        _escape_template(piece) if i % 2 == 0 else f"${{encodeURIComponent({idents[piece]})}}"
        for i, piece in enumerate(pieces)
    )


def _escape_template(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")
