# src/services/product_bindings.py

"""Product list query and create/update mutations for UI code."""

import logging
from collections.abc import Callable
from typing import Any

from src.auth.authenticator import AuthContext
from src.models.product import ProductFilters
from src.services.notifier import (
    SEVERITY_ERROR,
    Notification,
    NotificationSink,
)
from src.services.product_service import ProductService
from src.services.query_client import (
    Mutation,
    QueryClient,
    QueryKey,
    QueryState,
)

logger = logging.getLogger("catalog_admin.bindings")

PRODUCTS_KEY = "products"

CREATED = Notification("Product created", "Product created successfully!")
UPDATED = Notification("Product updated", "Product updated successfully!")
CREATE_FAILED = Notification(
    "Error", "Failed to create product. Please try again.", SEVERITY_ERROR
)
UPDATE_FAILED = Notification(
    "Error", "Failed to update product. Please try again.", SEVERITY_ERROR
)


class ProductBindings:
    """Exposes product operations as cached queries and mutations.

    With an *auth_context* (delegated auth) the list key includes the
    current token and the query is disabled while no token is set.
    """

    def __init__(
        self,
        service: ProductService,
        query_client: QueryClient,
        notify: NotificationSink,
        auth_context: AuthContext | None = None,
    ) -> None:
        self.service = service
        self.query_client = query_client
        self.notify = notify
        self.auth_context = auth_context

    def products_key(self, filters: ProductFilters) -> QueryKey:
        if self.auth_context is None:
            return (PRODUCTS_KEY, filters)
        return (PRODUCTS_KEY, filters, self.auth_context.token)

    async def products(
        self, filters: ProductFilters | None = None
    ) -> QueryState:
        """List query; served from cache while fresh."""
        active_filters = filters or ProductFilters()
        enabled = (
            self.auth_context is None or bool(self.auth_context.token)
        )
        return await self.query_client.fetch_query(
            self.products_key(active_filters),
            lambda: self.service.fetch_list(active_filters),
            enabled=enabled,
        )

    def _after_write(self, message: Notification) -> None:
        self.query_client.invalidate_queries((PRODUCTS_KEY,))
        self.notify(message)

    def _on_create_success(self, _created: Any) -> None:
        self._after_write(CREATED)

    def _on_update_success(self, _updated: Any) -> None:
        self._after_write(UPDATED)

    def _notify_failure(
        self, message: Notification
    ) -> Callable[[Exception], None]:
        def _handler(exc: Exception) -> None:
            logger.warning("%s: %s", message.description, exc)
            self.notify(message)

        return _handler

    @property
    def create_product(self) -> Mutation:
        """Mutation: ``mutate(data)`` with ``CreateProductData`` or a dict."""
        return Mutation(
            self.service.create,
            on_success=self._on_create_success,
            on_error=self._notify_failure(CREATE_FAILED),
        )

    @property
    def update_product(self) -> Mutation:
        """Mutation: ``mutate(product_id, data)``."""
        return Mutation(
            self.service.update,
            on_success=self._on_update_success,
            on_error=self._notify_failure(UPDATE_FAILED),
        )
