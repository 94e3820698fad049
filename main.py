# main.py

"""Entry point for the catalog_admin command line client."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.models.product import ProductFilters

logger = logging.getLogger("catalog_admin.main")


def _add_payload_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "-d",
        "--data",
        default=None,
        help="Product fields as an inline JSON object.",
    )
    group.add_argument(
        "--file",
        default=None,
        help="Path to a JSON file with the product fields.",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="catalog_admin",
        description="Admin client for the product catalogue API.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List products.")
    list_cmd.add_argument("--page", type=int, default=None)
    list_cmd.add_argument("--limit", type=int, default=None)
    list_cmd.add_argument("--search", default=None)
    list_cmd.add_argument("--sort-by", default=None, dest="sort_by")
    list_cmd.add_argument(
        "--order", choices=["asc", "desc"], default=None
    )
    active = list_cmd.add_mutually_exclusive_group()
    active.add_argument(
        "--active",
        action="store_const",
        const=True,
        dest="is_active",
        help="Only active products.",
    )
    active.add_argument(
        "--inactive",
        action="store_const",
        const=False,
        dest="is_active",
        help="Only inactive products.",
    )
    list_cmd.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )

    create_cmd = commands.add_parser("create", help="Create a product.")
    _add_payload_args(create_cmd)

    update_cmd = commands.add_parser(
        "update", help="Update a product (images are not updatable)."
    )
    update_cmd.add_argument("product_id")
    _add_payload_args(update_cmd)

    return parser


def _filters_from_args(args: argparse.Namespace) -> ProductFilters:
    return ProductFilters(
        page=args.page,
        limit=args.limit,
        search=args.search,
        sort_by=args.sort_by,
        order=args.order,
        is_active=args.is_active,
    )


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to the matching CLI command."""
    log_file = setup_logging()
    logger.info("catalog_admin starting, log file: %s", log_file)

    args = _build_parser().parse_args(argv)

    from src.cli.runner import (
        cli_create,
        cli_list,
        cli_update,
        load_payload,
    )

    try:
        if args.command == "list":
            exit_code = asyncio.run(
                cli_list(_filters_from_args(args), args.output_format)
            )
        elif args.command == "create":
            payload = load_payload(args.data, args.file)
            exit_code = asyncio.run(cli_create(payload))
        else:
            payload = load_payload(args.data, args.file)
            exit_code = asyncio.run(cli_update(args.product_id, payload))
    except Exception:
        logger.critical("Fatal error during CLI run", exc_info=True)
        raise
    finally:
        logger.info("catalog_admin shutting down")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
