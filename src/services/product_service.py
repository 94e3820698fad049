# src/services/product_service.py

"""Product operations against the admin API: list, create, update."""

import logging
from typing import Any
from urllib.parse import quote, urlencode

from curl_cffi import requests as curl_requests

from src.api.errors import CreateFailed, FetchFailed, UpdateFailed
from src.api.gateway import RequestGateway, is_ok
from src.api.normalizer import normalize_products_response
from src.auth.authenticator import (
    AuthContext,
    AutonomousAuthenticator,
    BaseAuthenticator,
    DelegatedAuthenticator,
)
from src.config.settings import Settings
from src.models.product import (
    CreateProductData,
    ProductFilters,
    ProductsResponse,
    UpdateProductData,
)

logger = logging.getLogger("catalog_admin.products")


def _as_payload(
    data: CreateProductData | UpdateProductData | dict[str, Any],
) -> dict[str, Any]:
    """Accept either a payload dataclass or a plain dict."""
    if isinstance(data, dict):
        return dict(data)
    return data.to_payload()


def build_list_endpoint(filters: ProductFilters | None) -> str:
    """``/admin/products`` plus a query string of the present filters."""
    params = (filters or ProductFilters()).to_query_params()
    query = urlencode(params)
    endpoint = Settings.PRODUCTS_ENDPOINT
    return f"{endpoint}?{query}" if query else endpoint


class ProductService:
    """Builds product requests and hands them to the gateway."""

    def __init__(self, gateway: RequestGateway) -> None:
        self.gateway = gateway

    async def fetch_list(
        self, filters: ProductFilters | None = None
    ) -> ProductsResponse:
        """Fetch one page of products and normalize it."""
        endpoint = build_list_endpoint(filters)
        resp = await self.gateway.request(endpoint)

        if not is_ok(resp):
            logger.error(
                "Error fetching products: HTTP %d", resp.status_code
            )
            raise FetchFailed(status_code=resp.status_code)

        result = normalize_products_response(resp.json())
        logger.info(
            "Fetched %d products (page %d of %d)",
            len(result.data),
            result.pagination.page,
            result.pagination.total_pages,
        )
        return result

    async def create(
        self, data: CreateProductData | dict[str, Any]
    ) -> dict[str, Any]:
        """Create a product; returns the API body unnormalized."""
        resp = await self.gateway.request(
            Settings.PRODUCTS_ENDPOINT,
            method="POST",
            json=_as_payload(data),
        )

        if not is_ok(resp):
            logger.error(
                "Error creating product: HTTP %d", resp.status_code
            )
            raise CreateFailed(status_code=resp.status_code)

        created: dict[str, Any] = resp.json()
        logger.info("Product created")
        return created

    async def update(
        self,
        product_id: str,
        data: UpdateProductData | dict[str, Any],
    ) -> dict[str, Any]:
        """Patch a product; ``images`` is never sent on this path."""
        payload = _as_payload(data)
        if payload.pop("images", None) is not None:
            logger.debug(
                "Dropped images from update of product %s", product_id
            )

        resp = await self.gateway.request(
            f"{Settings.PRODUCTS_ENDPOINT}/{quote(str(product_id), safe='')}",
            method="PATCH",
            json=payload,
        )

        if not is_ok(resp):
            logger.error(
                "Error updating product %s: HTTP %d %s",
                product_id,
                resp.status_code,
                resp.text,
            )
            raise UpdateFailed(status_code=resp.status_code)

        updated: dict[str, Any] = resp.json()
        logger.info("Product %s updated", product_id)
        return updated


def build_product_service(
    session: curl_requests.AsyncSession,
    auth_context: AuthContext | None = None,
) -> ProductService:
    """Wire a service with the delegated or the autonomous authenticator.

    With an *auth_context* the caller's token is used as-is; without
    one the service logs in with the configured admin credentials.
    """
    authenticator: BaseAuthenticator
    if auth_context is not None:
        authenticator = DelegatedAuthenticator(auth_context)
    else:
        authenticator = AutonomousAuthenticator(session)
    return ProductService(RequestGateway(session, authenticator))
