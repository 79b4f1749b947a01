from __future__ import annotations

from expert_booking.application.dto.api_payloads import AuthResponseDTO, parse_payload
from expert_booking.application.ports.auth_api import AuthApiPort
from expert_booking.domain.entities.user import AuthSession
from expert_booking.infrastructure.api.http_client import ApiClient


class HttpAuthApi(AuthApiPort):
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def login(self, email: str, password: str) -> AuthSession:
        data = self._client.post("/auth/login", json={"email": email, "password": password}, authenticated=False)
        return parse_payload(AuthResponseDTO, data).to_entity()

    def register(self, name: str, email: str, password: str, role: str) -> AuthSession:
        data = self._client.post(
            "/auth/register",
            json={"name": name, "email": email, "password": password, "role": role},
            authenticated=False,
        )
        return parse_payload(AuthResponseDTO, data).to_entity()

    def logout(self) -> None:
        self._client.post("/auth/logout")
