"""prism-router CLI — compile route modules into a typed client.

Entry point registered as ``prism-router`` in ``pyproject.toml``::

    [project.scripts]
    prism-router = "prism_router.cli:main"
"""

import argparse
import sys


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        print("Run 'prism-router help' for usage information.", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="prism-router",
        description="Generate a typed API client from route definitions.",
    )
    subparsers = parser.add_subparsers(dest="command", parser_class=_Parser)

    # -- prism-router compile ---------------------------------------------
    compile_parser = subparsers.add_parser("compile", help="Generate API client from route definitions")
    compile_parser.add_argument(
        "--config",
        default=None,
        help="Config file (default: first of prism.config.py, config.prism.router.py)",
    )
    compile_parser.add_argument("-v", "--verbose", action="store_true", help="Log every registered route")

    # -- prism-router help ------------------------------------------------
    subparsers.add_parser("help", help="Show this help message")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``prism-router`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        print("No command specified. Use 'compile' or 'help'.", file=sys.stderr)
        parser.print_help(sys.stderr)
        sys.exit(1)

    if args.command == "help":
        parser.print_help()
        sys.exit(0)

    if args.command == "compile":
        from prism_router.cli._compile import run_compile

        run_compile(args)
