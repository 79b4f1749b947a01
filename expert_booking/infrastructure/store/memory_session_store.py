from __future__ import annotations

import threading
from dataclasses import replace

from expert_booking.application.ports.session_store import SessionStorePort
from expert_booking.domain.entities.user import AuthSession


class MemorySessionStore(SessionStorePort):
    def __init__(self, session: AuthSession | None = None) -> None:
        self._session = session
        self._lock = threading.Lock()

    def get(self) -> AuthSession | None:
        with self._lock:
            return self._session

    def set(self, session: AuthSession) -> None:
        with self._lock:
            self._session = session

    def update_token(self, token: str) -> None:
        with self._lock:
            if self._session is not None:
                self._session = replace(self._session, token=token)

    def clear(self) -> None:
        with self._lock:
            self._session = None


class MemorySessionRegistry:
    """
    Authenticated sessions of every caller, keyed by the caller's session id.

    Entries exist only between set() and clear(), so anonymous callers cost nothing.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, AuthSession] = {}
        self._lock = threading.Lock()

    def store_for(self, session_id: str) -> SessionStorePort:
        return _CallerSessionStore(self, session_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _get(self, session_id: str) -> AuthSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def _set(self, session_id: str, session: AuthSession) -> None:
        with self._lock:
            self._sessions[session_id] = session

    def _update_token(self, session_id: str, token: str) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions[session_id] = replace(session, token=token)

    def _clear(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)


class _CallerSessionStore(SessionStorePort):
    def __init__(self, registry: MemorySessionRegistry, session_id: str) -> None:
        self._registry = registry
        self.session_id = session_id

    def get(self) -> AuthSession | None:
        return self._registry._get(self.session_id)

    def set(self, session: AuthSession) -> None:
        self._registry._set(self.session_id, session)

    def update_token(self, token: str) -> None:
        self._registry._update_token(self.session_id, token)

    def clear(self) -> None:
        self._registry._clear(self.session_id)
