from __future__ import annotations

import logging

from expert_booking.application.exceptions import BookingValidationError
from expert_booking.application.ports.auth_api import AuthApiPort
from expert_booking.application.ports.session_store import SessionStorePort
from expert_booking.domain.entities.user import AuthSession, User

ROLES = ("client", "expert")


class AuthenticateUseCase:
    def __init__(self, auth_api: AuthApiPort, sessions: SessionStorePort) -> None:
        self._auth_api = auth_api
        self._sessions = sessions
        self._logger = logging.getLogger(__name__)

    def login(self, email: str, password: str) -> AuthSession:
        session = self._auth_api.login(email.strip().lower(), password)
        self._sessions.set(session)
        self._logger.info("User logged in", extra={"user_id": session.user.id})
        return session

    def register(self, name: str, email: str, password: str, role: str = "client") -> AuthSession:
        if role not in ROLES:
            raise BookingValidationError(f"Unknown role: {role}")
        session = self._auth_api.register(name.strip(), email.strip().lower(), password, role)
        self._sessions.set(session)
        self._logger.info("User registered", extra={"user_id": session.user.id})
        return session

    def logout(self) -> None:
        try:
            self._auth_api.logout()
        finally:
            self._sessions.clear()
        self._logger.info("User logged out")

    def current_user(self) -> User | None:
        session = self._sessions.get()
        return session.user if session else None
