# src/api/gateway.py

"""Authenticated request gateway with a single re-auth retry."""

import logging
from enum import Enum
from typing import Any

from curl_cffi import requests as curl_requests

from src.api.errors import InvalidTransition
from src.auth.authenticator import BaseAuthenticator
from src.config.settings import Settings

logger = logging.getLogger("catalog_admin.gateway")

HTTP_UNAUTHORIZED = 401


class RequestState(str, Enum):
    NEED_AUTH = "need_auth"
    REQUESTING = "requesting"
    RETRYING = "retrying"
    DONE = "done"
    FAILED = "failed"


# Every legal move of one gateway call.  RETRYING is reachable once,
# and only from REQUESTING, which bounds each call to two HTTP sends.
TRANSITIONS: dict[RequestState, frozenset[RequestState]] = {
    RequestState.NEED_AUTH: frozenset(
        {RequestState.REQUESTING, RequestState.FAILED}
    ),
    RequestState.REQUESTING: frozenset(
        {RequestState.DONE, RequestState.RETRYING, RequestState.FAILED}
    ),
    RequestState.RETRYING: frozenset(
        {RequestState.DONE, RequestState.FAILED}
    ),
    RequestState.DONE: frozenset(),
    RequestState.FAILED: frozenset(),
}

TERMINAL_STATES = frozenset({RequestState.DONE, RequestState.FAILED})


def advance(
    current: RequestState, target: RequestState
) -> RequestState:
    """Move to *target*, refusing anything outside ``TRANSITIONS``."""
    if target not in TRANSITIONS[current]:
        raise InvalidTransition(
            f"Illegal request transition {current.value} -> {target.value}"
        )
    logger.debug("Request state %s -> %s", current.value, target.value)
    return target


def is_ok(resp: curl_requests.Response) -> bool:
    """True for 2xx responses."""
    return 200 <= resp.status_code < 300


class RequestGateway:
    """Sends bearer-authenticated requests to the admin API.

    A 401 triggers one invalidate + re-auth + resend when the
    authenticator can mint a new token.  Whatever the last attempt
    returns is handed back; status interpretation belongs to callers.

    ``last_state`` records the end state of whichever call finished
    most recently.  Overlapping calls overwrite it; use
    :meth:`request_with_state` when the state of a specific call
    matters.
    """

    def __init__(
        self,
        session: curl_requests.AsyncSession,
        authenticator: BaseAuthenticator,
        base_url: str = Settings.API_BASE_URL,
    ) -> None:
        self.session = session
        self.authenticator = authenticator
        self.base_url = base_url
        self.last_state: RequestState | None = None

    async def _send(
        self,
        token: str,
        endpoint: str,
        method: str,
        headers: dict[str, str] | None,
        json: Any,
    ) -> curl_requests.Response:
        merged_headers = {
            **Settings.DEFAULT_HEADERS,
            **(headers or {}),
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        return await self.session.request(
            method,
            f"{self.base_url}{endpoint}",
            headers=merged_headers,
            json=json,
            timeout=Settings.REQUEST_TIMEOUT,
        )

    async def request_with_state(
        self,
        endpoint: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> tuple[curl_requests.Response, RequestState]:
        """Run one authenticated call and report where it ended.

        The returned state belongs to this call alone, so it stays
        correct when several requests overlap on one gateway.  Raises
        whatever the authenticator raises when no token can be
        obtained; network errors propagate unchanged.
        """
        state = RequestState.NEED_AUTH
        try:
            token = await self.authenticator.get_token()
            state = advance(state, RequestState.REQUESTING)
            resp = await self._send(token, endpoint, method, headers, json)

            if (
                resp.status_code == HTTP_UNAUTHORIZED
                and self.authenticator.can_refresh
            ):
                logger.warning(
                    "%s %s returned 401, re-authenticating",
                    method,
                    endpoint,
                )
                self.authenticator.invalidate()
                token = await self.authenticator.get_token()
                state = advance(state, RequestState.RETRYING)
                resp = await self._send(
                    token, endpoint, method, headers, json
                )

            if (
                state is RequestState.RETRYING
                and resp.status_code == HTTP_UNAUTHORIZED
            ):
                logger.error(
                    "%s %s still unauthorized after re-auth",
                    method,
                    endpoint,
                )
                state = advance(state, RequestState.FAILED)
            else:
                state = advance(state, RequestState.DONE)
        except Exception:
            if state not in TERMINAL_STATES:
                state = advance(state, RequestState.FAILED)
            raise
        finally:
            self.last_state = state

        logger.debug(
            "%s %s -> HTTP %d", method, endpoint, resp.status_code
        )
        return resp, state

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> curl_requests.Response:
        """Like :meth:`request_with_state`, returning only the response."""
        resp, _state = await self.request_with_state(
            endpoint, method=method, headers=headers, json=json
        )
        return resp
