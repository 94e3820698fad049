# tests/test_product_bindings.py

"""Tests for the product query/mutation bindings."""

import unittest
from unittest.mock import AsyncMock, MagicMock

from src.api.errors import CreateFailed, UpdateFailed
from src.auth.authenticator import StaticAuthContext
from src.models.product import ProductFilters, ProductsResponse
from src.services.notifier import SEVERITY_ERROR, SEVERITY_INFO
from src.services.product_bindings import PRODUCTS_KEY, ProductBindings
from src.services.query_client import STATUS_IDLE, QueryClient


def _make_service() -> MagicMock:
    """Mock ProductService with async operations."""
    service = MagicMock()
    service.fetch_list = AsyncMock(return_value=ProductsResponse())
    service.create = AsyncMock(return_value={"id": "new"})
    service.update = AsyncMock(return_value={"id": "1"})
    return service


class TestProductListBinding(unittest.IsolatedAsyncioTestCase):
    """List query keying and enablement."""

    def setUp(self) -> None:
        self.service = _make_service()
        self.client = QueryClient()
        self.notify = MagicMock()

    async def test_autonomous_key_is_name_and_filters(self) -> None:
        bindings = ProductBindings(self.service, self.client, self.notify)
        filters = ProductFilters(page=2)
        self.assertEqual(
            bindings.products_key(filters), (PRODUCTS_KEY, filters)
        )

    async def test_list_query_cached_per_filters(self) -> None:
        bindings = ProductBindings(self.service, self.client, self.notify)
        await bindings.products(ProductFilters(page=1))
        await bindings.products(ProductFilters(page=1))
        await bindings.products(ProductFilters(page=2))
        self.assertEqual(self.service.fetch_list.await_count, 2)

    async def test_default_filters_used_when_none(self) -> None:
        bindings = ProductBindings(self.service, self.client, self.notify)
        state = await bindings.products()
        self.assertTrue(state.is_success)
        self.service.fetch_list.assert_awaited_once_with(ProductFilters())

    async def test_delegated_key_includes_token(self) -> None:
        context = StaticAuthContext("tok")
        bindings = ProductBindings(
            self.service, self.client, self.notify, auth_context=context
        )
        self.assertEqual(
            bindings.products_key(ProductFilters()),
            (PRODUCTS_KEY, ProductFilters(), "tok"),
        )

    async def test_delegated_disabled_without_token(self) -> None:
        bindings = ProductBindings(
            self.service,
            self.client,
            self.notify,
            auth_context=StaticAuthContext(None),
        )
        state = await bindings.products()
        self.assertEqual(state.status, STATUS_IDLE)
        self.service.fetch_list.assert_not_awaited()

    async def test_delegated_token_change_refetches(self) -> None:
        context = StaticAuthContext("a")
        bindings = ProductBindings(
            self.service, self.client, self.notify, auth_context=context
        )
        await bindings.products()
        context.token = "b"
        await bindings.products()
        self.assertEqual(self.service.fetch_list.await_count, 2)

    async def test_fetch_error_becomes_error_state(self) -> None:
        self.service.fetch_list.side_effect = RuntimeError("down")
        bindings = ProductBindings(self.service, self.client, self.notify)
        state = await bindings.products()
        self.assertTrue(state.is_error)
        self.notify.assert_not_called()


class TestProductMutations(unittest.IsolatedAsyncioTestCase):
    """Create/update invalidate lists and notify."""

    def setUp(self) -> None:
        self.service = _make_service()
        self.client = QueryClient()
        self.notify = MagicMock()
        self.bindings = ProductBindings(
            self.service, self.client, self.notify
        )

    async def test_create_success_invalidates_and_notifies(self) -> None:
        await self.bindings.products()
        result = await self.bindings.create_product.mutate({"name": "x"})

        self.assertTrue(result.is_success)
        self.assertEqual(result.data, {"id": "new"})
        note = self.notify.call_args.args[0]
        self.assertEqual(note.title, "Product created")
        self.assertEqual(note.severity, SEVERITY_INFO)

        # Next read goes back to the API
        await self.bindings.products()
        self.assertEqual(self.service.fetch_list.await_count, 2)

    async def test_create_failure_notifies_error(self) -> None:
        self.service.create.side_effect = CreateFailed(status_code=400)
        await self.bindings.products()

        result = await self.bindings.create_product.mutate({"name": "x"})

        self.assertFalse(result.is_success)
        self.assertEqual(self.service.create.await_count, 1)
        note = self.notify.call_args.args[0]
        self.assertEqual(note.severity, SEVERITY_ERROR)
        state = self.client.get_query_state(
            self.bindings.products_key(ProductFilters())
        )
        assert state is not None
        self.assertFalse(state.is_stale)

    async def test_update_success_invalidates_all_lists(self) -> None:
        await self.bindings.products(ProductFilters(page=1))
        await self.bindings.products(ProductFilters(page=2))

        await self.bindings.update_product.mutate("1", {"name": "y"})

        self.service.update.assert_awaited_once_with("1", {"name": "y"})
        for page in (1, 2):
            state = self.client.get_query_state(
                self.bindings.products_key(ProductFilters(page=page))
            )
            assert state is not None
            self.assertTrue(state.is_stale)
        self.assertEqual(
            self.notify.call_args.args[0].title, "Product updated"
        )

    async def test_update_failure_notifies_error(self) -> None:
        self.service.update.side_effect = UpdateFailed(status_code=422)
        result = await self.bindings.update_product.mutate("1", {})
        self.assertIsInstance(result.error, UpdateFailed)
        self.assertEqual(
            self.notify.call_args.args[0].severity, SEVERITY_ERROR
        )


if __name__ == "__main__":
    unittest.main()
