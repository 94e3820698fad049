# src/api/normalizer.py

"""Shape-tolerant normalization of admin API responses.

The backend has shipped several response layouts over time (products
nested under ``data.products``, flat ``products``, bare ``data`` lists;
``productId`` vs ``_id`` vs ``id``; images as URL strings or as
``{"url": ...}`` objects).  Every lookup here is a first-match chain of
accessor functions, so the functions are pure and total: any JSON value
yields a ``ProductsResponse``, never an exception.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from src.config.settings import Settings
from src.models.product import Pagination, Product, ProductsResponse

logger = logging.getLogger("catalog_admin.normalizer")

Accessor = Callable[[Any], Any]


def first_match(
    source: Any,
    accessors: Sequence[Accessor],
    default: Any = None,
) -> Any:
    """Return the first non-``None`` accessor result, else *default*."""
    for accessor in accessors:
        value = accessor(source)
        if value is not None:
            return value
    return default


def at(*path: str) -> Accessor:
    """Build an accessor that walks *path* through nested dicts."""

    def _get(source: Any) -> Any:
        node = source
        for key in path:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node

    return _get


def as_list(accessor: Accessor) -> Accessor:
    """Accept the wrapped result only when it is a list."""

    def _get(source: Any) -> Any:
        value = accessor(source)
        return value if isinstance(value, list) else None

    return _get


def non_empty(accessor: Accessor) -> Accessor:
    """Treat empty strings as absent."""

    def _get(source: Any) -> Any:
        value = accessor(source)
        return None if value == "" else value

    return _get


def _to_int(value: Any) -> int:
    # Ints pass through untouched; only strings and floats are parsed.
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    return int(float(value))


def positive_int(accessor: Accessor) -> Accessor:
    """Accept numbers and numeric strings; zero counts as absent."""

    def _get(source: Any) -> Any:
        value = accessor(source)
        if isinstance(value, bool) or value is None:
            return None
        try:
            number = _to_int(value)
        except (TypeError, ValueError, OverflowError):
            return None
        return number or None

    return _get


# Token lookup for POST /auth/login, newest layout first
TOKEN_ACCESSORS: tuple[Accessor, ...] = (
    non_empty(at("data", "tokens", "accessToken")),
    non_empty(at("token")),
    non_empty(at("access_token")),
    non_empty(at("accessToken")),
)

_PRODUCT_LIST: tuple[Accessor, ...] = (
    as_list(at("data", "products")),
    as_list(at("products")),
    as_list(at("data")),
)

_PRODUCT_ID: tuple[Accessor, ...] = (
    non_empty(at("productId")),
    non_empty(at("_id")),
    non_empty(at("id")),
)

_PAGE = (positive_int(at("data", "currentPage")), positive_int(at("currentPage")))
_LIMIT = (positive_int(at("data", "limit")), positive_int(at("limit")))
_TOTAL = (
    positive_int(at("data", "totalProducts")),
    positive_int(at("totalProducts")),
    positive_int(at("total")),
)
_TOTAL_PAGES = (
    positive_int(at("data", "totalPages")),
    positive_int(at("totalPages")),
)


def normalize_images(raw: Any) -> list[str]:
    """Flatten an images array to a list of URL strings.

    ``[{"url": "a"}, {"url": "b"}]`` and ``["a", "b"]`` both become
    ``["a", "b"]``.
    """
    if not isinstance(raw, list) or not raw:
        return []

    first = raw[0]
    if isinstance(first, dict) and first.get("url"):
        return [
            img["url"]
            for img in raw
            if isinstance(img, dict) and isinstance(img.get("url"), str)
        ]
    return [img for img in raw if isinstance(img, str)]


def normalize_product(raw: dict[str, Any]) -> Product:
    """Map one backend product dict onto the canonical ``Product``."""
    product_id = first_match(raw, _PRODUCT_ID)
    return Product(
        id=str(product_id) if product_id is not None else None,
        name=raw.get("name"),
        description=raw.get("description"),
        price=raw.get("price"),
        promotional_price=raw.get("promotionalPrice"),
        is_promotion_active=raw.get("isPromotionActive"),
        stock_quantity=raw.get("stockQuantity"),
        images=normalize_images(raw.get("images")),
        is_active=raw.get("isActive"),
        created_at=raw.get("createdAt"),
        updated_at=raw.get("updatedAt"),
    )


def normalize_pagination(payload: Any) -> Pagination:
    return Pagination(
        page=first_match(payload, _PAGE, Settings.DEFAULT_PAGE),
        limit=first_match(payload, _LIMIT, Settings.DEFAULT_LIMIT),
        total=first_match(payload, _TOTAL, Settings.DEFAULT_TOTAL),
        total_pages=first_match(
            payload, _TOTAL_PAGES, Settings.DEFAULT_TOTAL_PAGES
        ),
    )


def normalize_products_response(payload: Any) -> ProductsResponse:
    """Normalize a ``GET /admin/products`` body of any known layout."""
    raw_products: list[Any] = first_match(payload, _PRODUCT_LIST, [])

    products: list[Product] = []
    skipped = 0
    for raw in raw_products:
        if not isinstance(raw, dict):
            skipped += 1
            continue
        products.append(normalize_product(raw))

    if skipped:
        logger.debug("Skipped %d non-object product entries", skipped)

    return ProductsResponse(
        data=products,
        pagination=normalize_pagination(payload),
    )
