# src/auth/authenticator.py

"""Bearer-token providers for the request gateway.

Two variants exist:

* :class:`DelegatedAuthenticator` trusts a token owned by someone else
  (a UI session, an auth context).  It never logs in and cannot
  recover from a rejected token.
* :class:`AutonomousAuthenticator` logs in with fixed admin
  credentials and caches the token in a :class:`TokenStore` until
  shortly before the server-side expiry.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol

from curl_cffi import requests as curl_requests

from src.api.errors import AuthenticationFailed, Unauthenticated
from src.api.normalizer import TOKEN_ACCESSORS, first_match
from src.auth.token_store import TokenStore
from src.config.settings import Settings

logger = logging.getLogger("catalog_admin.auth")


class AuthContext(Protocol):
    """Anything exposing the current session token (or ``None``)."""

    token: str | None


@dataclass
class StaticAuthContext:
    """Minimal auth context holding a token set by the caller."""

    token: str | None = None


class BaseAuthenticator(ABC):
    """Common interface the gateway relies on."""

    @property
    @abstractmethod
    def can_refresh(self) -> bool:
        """Whether a rejected token can be replaced by a new one."""
        ...

    @abstractmethod
    async def get_token(self) -> str:
        """Return a usable bearer token or raise ``Unauthenticated``."""
        ...

    @abstractmethod
    def invalidate(self) -> None:
        """Drop any cached token."""
        ...


class DelegatedAuthenticator(BaseAuthenticator):
    """Reads the token from an external auth context on every call."""

    def __init__(self, context: AuthContext) -> None:
        self.context = context

    @property
    def can_refresh(self) -> bool:
        return False

    async def get_token(self) -> str:
        token = self.context.token
        if not token:
            logger.warning("No token in auth context")
            raise Unauthenticated()
        return token

    def invalidate(self) -> None:
        # The context owns the token; nothing cached here.
        return None


class AutonomousAuthenticator(BaseAuthenticator):
    """Logs in with admin credentials and caches the resulting token."""

    def __init__(
        self,
        session: curl_requests.AsyncSession,
        email: str = Settings.ADMIN_EMAIL,
        password: str = Settings.ADMIN_PASSWORD,
        store: TokenStore | None = None,
        base_url: str = Settings.API_BASE_URL,
        ttl_seconds: float = Settings.TOKEN_TTL_SECONDS,
    ) -> None:
        self.session = session
        self.email = email
        self.password = password
        self.store = store or TokenStore()
        self.base_url = base_url
        self.ttl_seconds = ttl_seconds

    @property
    def can_refresh(self) -> bool:
        return True

    async def get_token(self) -> str:
        """Return the cached token, logging in only on a miss."""
        cached = self.store.get()
        if cached is not None:
            return cached
        return await self._login()

    def invalidate(self) -> None:
        self.store.invalidate()

    async def _login(self) -> str:
        """POST the admin credentials and cache the returned token."""
        url = f"{self.base_url}{Settings.LOGIN_ENDPOINT}"
        logger.info("Logging in as %s", self.email or "<unset>")

        resp = await self.session.post(
            url,
            headers={
                **Settings.DEFAULT_HEADERS,
                "Content-Type": "application/json",
            },
            json={"email": self.email, "password": self.password},
            timeout=Settings.REQUEST_TIMEOUT,
        )
        if not 200 <= resp.status_code < 300:
            logger.error(
                "Login rejected with HTTP %d", resp.status_code
            )
            raise AuthenticationFailed(status_code=resp.status_code)

        try:
            body: Any = resp.json()
        except ValueError as exc:
            logger.error(
                "Login response is not JSON: %s", exc, exc_info=True
            )
            raise AuthenticationFailed(
                status_code=resp.status_code
            ) from exc

        token = first_match(body, TOKEN_ACCESSORS)
        if not isinstance(token, str):
            logger.error("Login response carries no access token")
            raise AuthenticationFailed(
                "Login response did not include a token",
                status_code=resp.status_code,
            )

        self.store.set(token, self.ttl_seconds)
        logger.info(
            "Login succeeded, token valid for %.0f minutes",
            self.ttl_seconds / 60,
        )
        return token
