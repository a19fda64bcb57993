"""Path parameter parsing and placeholder translation.

Route paths use ``{name}`` placeholders.  A placeholder usually fills a
whole segment (``/users/{id}``) but may also sit inside one
(``/files/{name}.json``, ``/v{version}/items``).  Dispatch layers with
their own parameter syntax get a translated copy via :func:`dispatch_path`.
"""

import re

from prism_router.routing.route import PathSegment

PLACEHOLDER_RE = re.compile(r"\{([^{}/]+)\}")

# style -> replacement template for one placeholder
PLACEHOLDER_STYLES: dict[str, str] = {
    "brace": "{{{name}}}",
    "colon": ":{name}",
    "angle": "<{name}>",
}


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments, dropping empty ones.

    Only a segment that is exactly one placeholder is a parameter segment;
    a segment mixing literal text and placeholders stays a literal.

    Examples::

        "/users"       -> [PathSegment("users")]
        "/users/{id}"  -> [PathSegment("users"), PathSegment("{id}", is_param=True, param_name="id")]
    """
    segments: list[PathSegment] = []
    for part in path.split("/"):
        if not part:
            continue
        match = PLACEHOLDER_RE.fullmatch(part)
        if match:
            segments.append(PathSegment(value=part, is_param=True, param_name=match.group(1)))
        else:
            segments.append(PathSegment(value=part))
    return segments


def path_params(path: str) -> list[str]:
    """Return the placeholder names of *path*, in path order.

    Placeholders inside a segment count too.
    """
    return PLACEHOLDER_RE.findall(path)


def segment_pattern(segment: str) -> re.Pattern[str]:
    """Compile a segment mixing literal text and placeholders.

    ``"{name}.json"`` becomes ``([^/]+?)\\.json``; groups follow the order
    of :func:`path_params` on the same segment.
    """
    pieces = PLACEHOLDER_RE.split(segment)
    # split() alternates literal text and captured placeholder names
    return re.compile(
        "".join(re.escape(piece) if i % 2 == 0 else "([^/]+?)" for i, piece in enumerate(pieces))
    )


def dispatch_path(path: str, style: str = "colon", prefix: str = "") -> str:
    """Translate ``{name}`` placeholders to another dispatch layer's syntax.

    Raises ``KeyError`` if *style* is not one of :data:`PLACEHOLDER_STYLES`.
    """
    template = PLACEHOLDER_STYLES[style]
    return join_prefix(prefix, PLACEHOLDER_RE.sub(lambda m: template.format(name=m.group(1)), path))


def join_prefix(prefix: str, path: str) -> str:
    """Join a group prefix and a route path with exactly one slash between them."""
    if not prefix:
        return path
    return "/" + "/".join(part for part in (prefix.strip("/"), path.strip("/")) if part)
