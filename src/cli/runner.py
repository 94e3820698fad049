# src/cli/runner.py

"""Headless CLI commands built on the product bindings."""

import json
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from curl_cffi import requests as curl_requests
from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.models.product import Product, ProductFilters
from src.services.notifier import ConsoleNotifier
from src.services.product_bindings import ProductBindings
from src.services.product_service import build_product_service
from src.services.query_client import QueryClient

logger = logging.getLogger("catalog_admin.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def load_payload(
    data_json: str | None, file_path: str | None
) -> dict[str, Any]:
    """Read a JSON object from ``--data`` or ``--file``.

    Raises ``SystemExit`` when neither is given or the JSON is not an
    object.
    """
    if file_path is not None:
        raw = Path(file_path).read_text(encoding="utf-8")
    elif data_json is not None:
        raw = data_json
    else:
        _err.print("[red]Provide --data or --file[/red]")
        raise SystemExit(1)

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        _err.print(f"[red]Invalid JSON payload: {exc}[/red]")
        raise SystemExit(1) from exc

    if not isinstance(payload, dict):
        _err.print("[red]Payload must be a JSON object[/red]")
        raise SystemExit(1)
    return payload


@asynccontextmanager
async def open_bindings() -> AsyncIterator[ProductBindings]:
    """Bindings over a fresh session using admin credential login."""
    if not Settings.ADMIN_EMAIL:
        logger.warning(
            "CATALOG_ADMIN_EMAIL is not set; login will likely fail"
        )
    async with curl_requests.AsyncSession() as session:
        yield ProductBindings(
            build_product_service(session),
            QueryClient(),
            ConsoleNotifier(_err),
        )


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Products",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Name", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Promo", justify="right")
    table.add_column("Stock", justify="right")
    table.add_column("Active", justify="center")
    table.add_column("Images", justify="right", style="dim")

    for p in products:
        promo = (
            f"{p.promotional_price}"
            if p.is_promotion_active and p.promotional_price is not None
            else "—"
        )
        table.add_row(
            p.id or "—",
            (p.name or "")[:50],
            "—" if p.price is None else str(p.price),
            promo,
            "—" if p.stock_quantity is None else str(p.stock_quantity),
            "✅" if p.is_active else "❌",
            str(len(p.images)),
        )

    Console().print(table)


def _dump_json(payload: Any) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


async def cli_list(filters: ProductFilters, output_format: str) -> int:
    """List products and return an exit code (0=ok, 1=fail)."""
    async with open_bindings() as bindings:
        state = await bindings.products(filters)

    if state.is_error:
        _err.print(f"[red]Error: {state.error}[/red]")
        return 1

    page = state.data
    pagination = page.pagination
    _err.print(
        f"[green]✓ {len(page.data)} products[/green] "
        f"[dim]page {pagination.page}/{pagination.total_pages}, "
        f"{pagination.total} total[/dim]"
    )

    if output_format == "table":
        _print_table(page.data)
    else:
        _dump_json(page.to_dict())
    return 0


async def cli_create(payload: dict[str, Any]) -> int:
    """Create a product from *payload*."""
    async with open_bindings() as bindings:
        result = await bindings.create_product.mutate(payload)

    if not result.is_success:
        return 1
    _dump_json(result.data)
    return 0


async def cli_update(product_id: str, payload: dict[str, Any]) -> int:
    """Patch product *product_id* with *payload* (images are ignored)."""
    if "images" in payload:
        _err.print(
            "[yellow]Images cannot be changed here and will be "
            "ignored[/yellow]"
        )
    async with open_bindings() as bindings:
        result = await bindings.update_product.mutate(
            product_id, payload
        )

    if not result.is_success:
        return 1
    _dump_json(result.data)
    return 0
