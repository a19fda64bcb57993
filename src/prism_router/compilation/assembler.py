"""Client source assembly.

Serializes the client tree depth-first into a nested object literal and
renders it into the factory wrapper template with kida.
"""

from kida import Environment, PackageLoader

from prism_router.compilation.emitter import INDENT, ts_string
from prism_router.compilation.synthesizer import JSON_CONTENT_TYPES, property_key
from prism_router.compilation.tree import ClientNode

PREAMBLE = "// Generated API client\n// This file is auto-generated. Do not edit manually."

TEMPLATE_NAME = "client.ts"


def create_environment() -> Environment:
    """Create the kida environment holding the client wrapper template."""
    return Environment(
        loader=PackageLoader("prism_router.compilation", "templates"),
        autoescape=False,
    )


def serialize_tree(node: ClientNode, depth: int = 0) -> str:
    """Render *node* as an object literal.

    Methods come first, then nested segments, each in insertion order.
    The opening brace is not indented; everything inside is indented one
    level deeper than *depth*.
    """
    if not node.methods and not node.children:
        return "{}"

    inner = INDENT * (depth + 1)
    lines = ["{"]
    for source in node.methods.values():
        method_lines = source.splitlines()
        lines.append(inner + method_lines[0])
        lines.extend(inner + line if line else line for line in method_lines[1:])
        lines[-1] += ","
    for key, child in node.children.items():
        lines.append(f"{inner}{property_key(key)}: {serialize_tree(child, depth + 1)},")
    lines.append(INDENT * depth + "}")
    return "\n".join(lines)


def assemble_client(tree: ClientNode, name: str, base_url: str = "", env: Environment | None = None) -> str:
    """Return the complete client source file for *tree*.

    The factory is exported as ``create<name>`` and defaults its base URL
    to *base_url*.
    """
    env = env or create_environment()
    template = env.get_template(TEMPLATE_NAME)
    source = template.render(
        {
            "preamble": PREAMBLE,
            "name": name,
            "base_url": ts_string(base_url),
            "json_content_types": ", ".join(ts_string(t) for t in sorted(JSON_CONTENT_TYPES)),
            "api": serialize_tree(tree, depth=2),
        }
    )
    return source.rstrip("\n") + "\n"
