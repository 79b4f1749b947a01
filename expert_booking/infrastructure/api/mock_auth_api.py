from __future__ import annotations

import logging
import uuid

from expert_booking.application.exceptions import AuthenticationError
from expert_booking.application.ports.auth_api import AuthApiPort
from expert_booking.domain.entities.user import AuthSession, User
from expert_booking.infrastructure.api.mock_data import (
    MOCK_REFRESH_TOKEN,
    MOCK_TOKEN,
    MOCK_USER_EMAIL,
    MOCK_USER_PASSWORD,
)

MOCK_USER = User(id="1", name="Test User", email=MOCK_USER_EMAIL, role="client")


class MockAuthApi(AuthApiPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def login(self, email: str, password: str) -> AuthSession:
        if email == MOCK_USER_EMAIL and password == MOCK_USER_PASSWORD:
            return AuthSession(user=MOCK_USER, token=MOCK_TOKEN, refresh_token=MOCK_REFRESH_TOKEN)
        self._logger.warning("Mock login rejected", extra={"email": email})
        raise AuthenticationError("Invalid credentials", status_code=401)

    def register(self, name: str, email: str, password: str, role: str) -> AuthSession:
        user = User(id=uuid.uuid4().hex[:8], name=name, email=email, role=role)
        return AuthSession(user=user, token=MOCK_TOKEN)

    def logout(self) -> None:
        self._logger.info("Mock logout")
