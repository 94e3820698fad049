# src/models/product.py

"""Product data models shared by the normalizer, services and bindings."""

from dataclasses import dataclass, field
from typing import Any

from src.config.settings import Settings


@dataclass
class Product:
    """A single product in canonical (normalized) shape."""

    id: str | None
    name: str | None = None
    description: str | None = None
    price: float | None = None
    promotional_price: float | None = None
    is_promotion_active: bool | None = None
    stock_quantity: int | None = None
    images: list[str] = field(default_factory=lambda: list[str]())
    is_active: bool | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render the camelCase shape consumed by UI code."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "promotionalPrice": self.promotional_price,
            "isPromotionActive": self.is_promotion_active,
            "stockQuantity": self.stock_quantity,
            "images": list(self.images),
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Pagination:
    """Pagination block of a product list response."""

    page: int = Settings.DEFAULT_PAGE
    limit: int = Settings.DEFAULT_LIMIT
    total: int = Settings.DEFAULT_TOTAL
    total_pages: int = Settings.DEFAULT_TOTAL_PAGES

    def to_dict(self) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


@dataclass
class ProductsResponse:
    """A normalized page of products."""

    data: list[Product] = field(default_factory=lambda: list[Product]())
    pagination: Pagination = field(default_factory=Pagination)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [p.to_dict() for p in self.data],
            "pagination": self.pagination.to_dict(),
        }


@dataclass(frozen=True)
class ProductFilters:
    """Optional list filters.

    Frozen so an instance can be part of a query cache key.
    """

    page: int | None = None
    limit: int | None = None
    search: str | None = None
    sort_by: str | None = None
    order: str | None = None
    is_active: bool | None = None

    _WIRE_NAMES = (
        ("page", "page"),
        ("limit", "limit"),
        ("search", "search"),
        ("sort_by", "sortBy"),
        ("order", "order"),
        ("is_active", "isActive"),
    )
    _PAGING_FIELDS = frozenset({"page", "limit"})

    def to_query_params(self) -> list[tuple[str, str]]:
        """Return only the present fields as ``(wire_name, value)`` pairs.

        ``None`` and empty strings are omitted, as are a zero ``page``
        or ``limit``.  Booleans become ``"true"`` / ``"false"``, so
        ``is_active=False`` is still sent.
        """
        params: list[tuple[str, str]] = []
        for attr, wire_name in self._WIRE_NAMES:
            value = getattr(self, attr)
            if value is None or value == "":
                continue
            if attr in self._PAGING_FIELDS and value == 0:
                continue
            if isinstance(value, bool):
                params.append((wire_name, "true" if value else "false"))
            else:
                params.append((wire_name, str(value)))
        return params


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is ``None``."""
    return {k: v for k, v in payload.items() if v is not None}


@dataclass
class CreateProductData:
    """Write-side payload for creating a product."""

    name: str
    description: str
    price: float
    stock_quantity: int
    images: list[str] = field(default_factory=lambda: list[str]())
    promotional_price: float | None = None
    is_promotion_active: bool | None = None
    is_active: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        return _compact({
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "promotionalPrice": self.promotional_price,
            "isPromotionActive": self.is_promotion_active,
            "stockQuantity": self.stock_quantity,
            "images": list(self.images),
            "isActive": self.is_active,
        })


@dataclass
class UpdateProductData:
    """Write-side payload for a partial product update."""

    name: str | None = None
    description: str | None = None
    price: float | None = None
    promotional_price: float | None = None
    is_promotion_active: bool | None = None
    stock_quantity: int | None = None
    images: list[str] | None = None
    is_active: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        return _compact({
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "promotionalPrice": self.promotional_price,
            "isPromotionActive": self.is_promotion_active,
            "stockQuantity": self.stock_quantity,
            "images": self.images,
            "isActive": self.is_active,
        })
