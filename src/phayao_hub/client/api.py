"""HTTP client for the Phayao Hub API.

`HubClient` wraps an `httpx.AsyncClient` and owns the client half of a
signed-in session: the bearer token, a `SessionClock` and the
`SessionWatcher` that signs the user out after inactivity. The underlying
cookie jar keeps view markers between calls, so repeated detail fetches are
counted once per window just like in a browser.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from phayao_hub.core.settings import settings
from phayao_hub.services.session_clock import KeyValueStorage, MemoryStorage, SessionClock
from phayao_hub.services.session_watcher import ActivityFeed, SessionWatcher

logger = logging.getLogger(__name__)

HTTP_UNAUTHORIZED = 401
HTTP_BAD_REQUEST = 400


class HubClientError(RuntimeError):
    """Raised when a Phayao Hub request fails or is rejected."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SessionExpiredError(HubClientError):
    """Raised when an authenticated call is made after the session has expired."""


class HubClient:
    """Session-aware async client for the Phayao Hub API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        storage: KeyValueStorage | None = None,
        feed: ActivityFeed | None = None,
        clock: Callable[[], int] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout_seconds: float = 10.0,
        check_interval_seconds: float | None = None,
        on_logout: Callable[[], Awaitable[None] | None] | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.feed = feed or ActivityFeed()
        clock_kwargs: dict[str, Any] = {"timeout_ms": settings.session_timeout_ms}
        if clock is not None:
            clock_kwargs["clock"] = clock
        self.session_clock = SessionClock(storage or MemoryStorage(), **clock_kwargs)
        self.watcher = SessionWatcher(
            self.session_clock,
            self.feed,
            self._on_session_expired,
            interval_seconds=check_interval_seconds,
        )
        self.on_logout = on_logout
        self.token: str | None = None
        self.user: dict[str, Any] | None = None
        self._transport = transport
        self._timeout_seconds = timeout_seconds
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def __aenter__(self) -> HubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def cookies(self) -> httpx.Cookies:
        """Cookies the API has set on this client, view markers included."""
        if self._client is None:
            return httpx.Cookies()
        return self._client.cookies

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=httpx.Timeout(self._timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    async def close(self) -> None:
        """Stop the session watcher and release the HTTP connection pool."""
        await self.watcher.stop()
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_session(self) -> None:
        if self.token is None:
            raise HubClientError("Not signed in", status_code=HTTP_UNAUTHORIZED)
        if self.session_clock.is_expired():
            await self.logout()
            raise SessionExpiredError(
                "Session expired, please sign in again", status_code=HTTP_UNAUTHORIZED
            )
        self.session_clock.record_activity()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_data: Any | None = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = False,
    ) -> Any:
        if authenticated:
            await self._ensure_session()
        elif self.token is not None and self.session_clock.is_expired():
            # Expired between watcher ticks; do not send the stale token.
            await self.logout()

        headers: dict[str, str] = {}
        if self.token is not None:
            headers["Authorization"] = f"Bearer {self.token}"

        client = await self._ensure_client()
        try:
            response = await client.request(
                method, path, json=json_data, params=params, headers=headers
            )
        except httpx.HTTPError as exc:
            raise HubClientError(f"Request to {path} failed: {exc}") from exc

        if response.status_code >= HTTP_BAD_REQUEST:
            detail = _error_detail(response)
            if authenticated and response.status_code == HTTP_UNAUTHORIZED:
                # Server-side token expiry ends the local session too.
                await self.logout()
                raise SessionExpiredError(detail, status_code=response.status_code)
            raise HubClientError(detail, status_code=response.status_code)

        return response.json()

    async def _start_session(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.token = payload["access_token"]
        self.user = payload.get("user")
        self.session_clock.init()
        await self.watcher.start()
        return payload

    async def login(self, username: str, password: str) -> dict[str, Any]:
        """Sign in with a username or email and start the inactivity watch."""
        payload = await self._request(
            "POST", "/auth/login", json_data={"username": username, "password": password}
        )
        return await self._start_session(payload)

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        *,
        full_name: str | None = None,
        phone: str | None = None,
    ) -> dict[str, Any]:
        """Create an account; the new member is signed in immediately."""
        payload = await self._request(
            "POST",
            "/auth/register",
            json_data={
                "username": username,
                "email": email,
                "password": password,
                "full_name": full_name,
                "phone": phone,
            },
        )
        return await self._start_session(payload)

    async def logout(self) -> None:
        """Forget the token, stop watching and clear the session timestamps."""
        was_signed_in = self.token is not None
        self.token = None
        self.user = None
        await self.watcher.stop()
        self.session_clock.clear()
        if was_signed_in:
            await self._notify_logout()

    async def _on_session_expired(self) -> None:
        # The watcher has already detached itself and cleared the clock.
        logger.info("Signing out after session inactivity")
        self.token = None
        self.user = None
        await self._notify_logout()

    async def _notify_logout(self) -> None:
        if self.on_logout is None:
            return
        result = self.on_logout()
        if inspect.isawaitable(result):
            await result

    async def me(self) -> dict[str, Any]:
        return await self._request("GET", "/auth/me", authenticated=True)

    async def get_market_item(self, item_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/market-items/{item_id}")

    async def get_job(self, job_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/jobs/{job_id}")

    async def get_post(self, post_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/community-posts/{post_id}")

    async def get_guide(self, guide_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/guides/{guide_id}")

    async def view_job_profile(self, profile_id: int) -> bool:
        """Ping a job seeker profile view; returns whether it was counted."""
        payload = await self._request("POST", f"/job-profiles/{profile_id}/view")
        return bool(payload.get("counted"))


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return f"HTTP {response.status_code}"
