"""``prism-router compile`` — load the config file and write the client.

Prints a short diagnostic and exits with code 1 on any failure.
"""

import argparse
import logging
import sys

import anyio

from prism_router.compilation.compiler import compile_client
from prism_router.config import load_config
from prism_router.errors import PrismRouterError

logger = logging.getLogger("prism_router.cli")


def run_compile(args: argparse.Namespace) -> None:
    """Compile the client described by the config file in the working directory."""
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        logger.info("Output directory: %s", config.output_dir)
        logger.info("Client name: %s", config.name)
        logger.info("Base URL: %s", config.base_url or "(none)")
        output_path = anyio.run(compile_client, config)
    except PrismRouterError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(f"API client generated: {output_path}")
    print("Usage:")
    module = output_path.with_suffix("").as_posix()
    if not output_path.is_absolute():
        module = f"./{module}"
    print(f"  import {{ create{config.name} }} from '{module}';")
    print(f"  const client = create{config.name}('{config.base_url}');")
