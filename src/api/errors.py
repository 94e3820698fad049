# src/api/errors.py

"""Domain errors raised by the catalog client.

Each error carries a fixed, user-facing message.  Callers (queries,
mutations, the CLI) only ever surface ``str(exc)``; the HTTP status is
kept on the instance for logging.
"""


class CatalogError(Exception):
    """Base class for every failure raised by this package."""

    message: str = "Catalog request failed"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message or self.message)
        self.status_code = status_code


class Unauthenticated(CatalogError):
    """No token could be obtained (e.g. signed-out auth context)."""

    message = "Not authenticated"


class AuthenticationFailed(CatalogError):
    """The login call failed or returned no token."""

    message = "Authentication failed"


class FetchFailed(CatalogError):
    message = "Failed to fetch products"


class CreateFailed(CatalogError):
    message = "Failed to create product"


class UpdateFailed(CatalogError):
    message = "Failed to update product"


class InvalidTransition(RuntimeError):
    """Raised when the request state machine leaves its transition table."""
