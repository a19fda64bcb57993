"""Tests for prism_router.compilation.assembler — client file rendering."""

from prism_router.compilation.assembler import PREAMBLE, assemble_client, serialize_tree
from prism_router.compilation.tree import ClientNode


def _tree() -> ClientNode:
    root = ClientNode()
    users = root.child("api").child("users")
    users.methods["get"] = "get: async () => {\n  return 1;\n}"
    users.child("_id_").methods["delete"] = "delete: async () => {\n  return 2;\n}"
    return root


class TestSerializeTree:
    def test_empty_node(self) -> None:
        assert serialize_tree(ClientNode()) == "{}"

    def test_nesting_and_indentation(self) -> None:
        expected = "\n".join(
            [
                "{",
                "  api: {",
                "    users: {",
                "      get: async () => {",
                "        return 1;",
                "      },",
                "      _id_: {",
                "        delete: async () => {",
                "          return 2;",
                "        },",
                "      },",
                "    },",
                "  },",
                "}",
            ]
        )
        assert serialize_tree(_tree()) == expected

    def test_depth_offsets_inner_lines(self) -> None:
        text = serialize_tree(_tree(), depth=2)
        lines = text.splitlines()
        assert lines[0] == "{"
        assert lines[1] == "      api: {"
        assert lines[-1] == "    }"

    def test_non_identifier_keys_quoted(self) -> None:
        root = ClientNode()
        root.child("report.csv").methods["get"] = "get: async () => {}"
        assert '"report.csv": {' in serialize_tree(root)

    def test_methods_before_children(self) -> None:
        root = ClientNode()
        node = root.child("users")
        node.child("_id_").methods["get"] = "get: async () => {}"
        node.methods["post"] = "post: async () => {}"
        text = serialize_tree(root)
        assert text.index("post: async") < text.index("_id_: {")


class TestAssembleClient:
    def test_preamble_first(self) -> None:
        source = assemble_client(_tree(), "MyApi")
        assert source.startswith(PREAMBLE + "\n")

    def test_factory_name_and_base_url(self) -> None:
        source = assemble_client(_tree(), "MyApi", base_url="https://example.com")
        assert (
            "export const createMyApi = (baseUrl: string = 'https://example.com', "
            "interceptors: Interceptor[] = []) => {"
        ) in source

    def test_default_base_url_empty(self) -> None:
        source = assemble_client(_tree(), "Api")
        assert "baseUrl: string = ''" in source

    def test_api_tree_embedded(self) -> None:
        source = assemble_client(_tree(), "Api")
        assert "    api: {\n      api: {\n        users: {" in source
        assert "return {\n    api:" in source

    def test_helpers_present(self) -> None:
        source = assemble_client(_tree(), "Api")
        assert "type Interceptor = " in source
        assert "const isJsonContentType = " in source
        assert "'application/json'" in source

    def test_no_html_escaping(self) -> None:
        root = ClientNode()
        root.methods["get"] = "get: async (): Promise<A & B> => {}"
        source = assemble_client(root, "Api")
        assert "Promise<A & B>" in source
        assert "&amp;" not in source

    def test_single_trailing_newline(self) -> None:
        source = assemble_client(_tree(), "Api")
        assert source.endswith("};\n")
        assert not source.endswith("\n\n")

    def test_deterministic(self) -> None:
        assert assemble_client(_tree(), "Api", "x") == assemble_client(_tree(), "Api", "x")
