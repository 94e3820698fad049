# src/auth/token_store.py

"""In-memory bearer token store with an injectable clock."""

import logging
import time
from collections.abc import Callable

logger = logging.getLogger("catalog_admin.auth")


class TokenStore:
    """Holds one bearer token and the monotonic instant it expires at.

    The clock defaults to :func:`time.monotonic`; tests pass a fake one.
    """

    def __init__(
        self, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._clock = clock
        self._token: str | None = None
        self._expires_at: float = 0.0

    @property
    def expires_at(self) -> float:
        return self._expires_at

    def get(self) -> str | None:
        """Return the token while it is still valid, else ``None``."""
        if self._token is None:
            return None
        if self._clock() >= self._expires_at:
            logger.debug("Cached token expired")
            return None
        return self._token

    def set(self, token: str, ttl_seconds: float) -> None:
        """Store *token*, valid for *ttl_seconds* from now."""
        self._token = token
        self._expires_at = self._clock() + ttl_seconds
        logger.debug("Token cached for %.0fs", ttl_seconds)

    def invalidate(self) -> None:
        """Forget the token so the next lookup misses."""
        if self._token is not None:
            logger.info("Cached token invalidated")
        self._token = None
        self._expires_at = 0.0
