# tests/test_notifier.py

"""Tests for the console and Textual notification sinks."""

import io
import unittest
from unittest.mock import AsyncMock, MagicMock

from rich.console import Console

from src.services.notifier import (
    SEVERITY_ERROR,
    AppNotifier,
    ConsoleNotifier,
    Notification,
)
from src.services.product_bindings import ProductBindings
from src.services.query_client import QueryClient


class TestConsoleNotifier(unittest.TestCase):
    """Rich console rendering."""

    def test_prints_title_and_description(self) -> None:
        buffer = io.StringIO()
        notifier = ConsoleNotifier(Console(file=buffer, no_color=True))

        notifier(Notification("Product created", "All good"))

        output = buffer.getvalue()
        self.assertIn("Product created", output)
        self.assertIn("All good", output)

    def test_unknown_severity_still_prints(self) -> None:
        buffer = io.StringIO()
        notifier = ConsoleNotifier(Console(file=buffer, no_color=True))
        notifier(Notification("T", "D", severity="debug"))
        self.assertIn("D", buffer.getvalue())


class TestAppNotifier(unittest.TestCase):
    """Forwarding to Textual's App.notify."""

    def test_forwards_to_app_notify(self) -> None:
        app = MagicMock()
        AppNotifier(app)(
            Notification("Error", "Failed", severity=SEVERITY_ERROR)
        )
        app.notify.assert_called_once_with(
            "Failed", title="Error", severity="error"
        )

    def test_default_severity_is_information(self) -> None:
        app = MagicMock()
        AppNotifier(app)(Notification("Saved", "Done"))
        self.assertEqual(
            app.notify.call_args.kwargs["severity"], "information"
        )


class TestAppNotifierWithBindings(unittest.IsolatedAsyncioTestCase):
    """A Textual host passes AppNotifier as the bindings sink."""

    async def test_failed_update_becomes_error_toast(self) -> None:
        app = MagicMock()
        service = MagicMock()
        service.update = AsyncMock(side_effect=RuntimeError("down"))
        bindings = ProductBindings(service, QueryClient(), AppNotifier(app))

        await bindings.update_product.mutate("1", {"name": "x"})

        app.notify.assert_called_once_with(
            "Failed to update product. Please try again.",
            title="Error",
            severity="error",
        )


if __name__ == "__main__":
    unittest.main()
