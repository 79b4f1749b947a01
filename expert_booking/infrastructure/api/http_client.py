from __future__ import annotations

import copy
import logging
import time
from typing import Any

import httpx

from expert_booking.application.dto.api_payloads import TokenDTO, parse_payload
from expert_booking.application.exceptions import (
    AuthenticationError,
    BookingApiError,
    MalformedResponseError,
)
from expert_booking.application.ports.session_store import SessionStorePort

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."


class ApiClient:
    """
    Thin JSON client for the marketplace API.

    Adds the session's bearer token to every authenticated request. A 401 is
    answered by one token refresh and a single retry; if the refresh is not
    possible the session is cleared and AuthenticationError is raised.

    Without a session store every request goes out anonymous. Use bind() to
    get a client that acts for one caller while sharing the connection pool.
    """

    def __init__(
        self,
        base_url: str,
        sessions: SessionStorePort | None = None,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._sessions = sessions
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._logger = logging.getLogger(__name__)

    def bind(self, sessions: SessionStorePort) -> ApiClient:
        bound = copy.copy(self)
        bound._sessions = sessions
        return bound

    def get(self, path: str, params: dict[str, Any] | None = None, authenticated: bool = True) -> Any:
        return self.request("GET", path, params=params, authenticated=authenticated)

    def post(self, path: str, json: dict[str, Any] | None = None, authenticated: bool = True) -> Any:
        return self.request("POST", path, json=json, authenticated=authenticated)

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        authenticated: bool = True,
        retry_on_unauthorized: bool = True,
    ) -> Any:
        headers: dict[str, str] = {}
        session = self._sessions.get() if authenticated and self._sessions is not None else None
        if session is not None:
            headers["Authorization"] = f"Bearer {session.token}"

        started = time.monotonic()
        try:
            resp = self._client.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error(
                "Network error",
                extra={"method": method, "path": path, "error": str(e)},
            )
            raise BookingApiError(NETWORK_ERROR_MESSAGE) from e
        finally:
            self._logger.debug(
                "Request to %s took %dms", path, int((time.monotonic() - started) * 1000)
            )

        if resp.status_code == 401 and session is not None and retry_on_unauthorized:
            self._refresh_token()
            return self.request(
                method,
                path,
                params=params,
                json=json,
                authenticated=authenticated,
                retry_on_unauthorized=False,
            )

        if resp.status_code >= 400:
            message = _error_message(resp)
            self._logger.error(
                "API error",
                extra={"status": resp.status_code, "method": method, "path": path, "error": message},
            )
            if resp.status_code == 401:
                if self._sessions is not None:
                    self._sessions.clear()
                raise AuthenticationError(message, status_code=401)
            raise BookingApiError(message, status_code=resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"Invalid JSON from {path}") from e

    def close(self) -> None:
        self._client.close()

    def _refresh_token(self) -> None:
        session = self._sessions.get()
        if session is None or not session.refresh_token:
            self._sessions.clear()
            raise AuthenticationError("Session expired. Please log in again.", status_code=401)

        try:
            data = self.request(
                "POST",
                "/auth/refresh",
                json={"refreshToken": session.refresh_token},
                authenticated=False,
            )
            token = parse_payload(TokenDTO, data).token
        except BookingApiError as e:
            self._logger.error("Token refresh failed", extra={"error": str(e)})
            self._sessions.clear()
            raise AuthenticationError("Session expired. Please log in again.", status_code=401) from e

        self._sessions.update_token(token)
        self._logger.info("Access token refreshed")


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail") or body.get("error")
        if isinstance(message, str) and message:
            return message
    return f"Request failed with status {resp.status_code}"
