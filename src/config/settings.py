# src/config/settings.py

"""Central configuration for the catalog_admin client."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str) -> float | None:
    """Read an optional float from the environment (unset → None)."""
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


class Settings:
    """Central configuration for the catalog_admin client."""

    # --- Remote API ---
    API_BASE_URL: str = os.getenv(
        "CATALOG_API_BASE_URL",
        "https://apicalvaodecria-production.up.railway.app/api/v1",
    ).rstrip("/")
    LOGIN_ENDPOINT: str = "/auth/login"
    PRODUCTS_ENDPOINT: str = "/admin/products"

    # --- Credentials (autonomous login) ---
    ADMIN_EMAIL: str = os.getenv("CATALOG_ADMIN_EMAIL", "")
    ADMIN_PASSWORD: str = os.getenv("CATALOG_ADMIN_PASSWORD", "")

    # --- Auth ---
    # Server tokens live 60 minutes; we refresh 10 minutes early.
    TOKEN_TTL_SECONDS: float = 50 * 60

    # --- Requests ---
    REQUEST_TIMEOUT: float | None = _optional_float(
        "CATALOG_REQUEST_TIMEOUT"
    )                                   # None → wait indefinitely
    DEFAULT_HEADERS: dict[str, str] = {"Accept": "application/json"}

    # --- Query cache ---
    QUERY_STALE_SECONDS: float = 60.0   # Fresh window for cached lists
    # Entries not refreshed for this long are evicted from the cache
    QUERY_GC_SECONDS: float = 5 * QUERY_STALE_SECONDS

    # --- Pagination defaults (normalizer fallbacks) ---
    DEFAULT_PAGE: int = 1
    DEFAULT_LIMIT: int = 10
    DEFAULT_TOTAL: int = 0
    DEFAULT_TOTAL_PAGES: int = 1

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
