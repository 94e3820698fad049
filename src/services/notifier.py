# src/services/notifier.py

"""Notification value and the sinks that display it."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from rich.console import Console
from textual.app import App

logger = logging.getLogger("catalog_admin.notify")

# Same vocabulary as Textual's ``App.notify`` severity
SEVERITY_INFO = "information"
SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A fire-and-forget message for the user."""

    title: str
    description: str
    severity: str = SEVERITY_INFO


NotificationSink = Callable[[Notification], None]


class ConsoleNotifier:
    """Prints notifications to a Rich console (stderr by default)."""

    _STYLES = {
        SEVERITY_INFO: "green",
        SEVERITY_WARNING: "yellow",
        SEVERITY_ERROR: "red",
    }

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def __call__(self, notification: Notification) -> None:
        style = self._STYLES.get(notification.severity, "white")
        self.console.print(
            f"[bold {style}]{notification.title}[/bold {style}] "
            f"{notification.description}"
        )


class AppNotifier:
    """Forwards notifications to a running Textual app as toasts.

    A Textual host passes ``AppNotifier(self)`` as the ``notify`` sink
    of :class:`~src.services.product_bindings.ProductBindings`.
    """

    def __init__(self, app: App[object]) -> None:
        self.app = app

    def __call__(self, notification: Notification) -> None:
        if notification.severity == SEVERITY_ERROR:
            logger.warning(
                "Notifying error: %s", notification.description
            )
        self.app.notify(
            notification.description,
            title=notification.title,
            severity=notification.severity,  # type: ignore[arg-type]
        )
