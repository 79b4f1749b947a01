from __future__ import annotations

from abc import ABC, abstractmethod

from expert_booking.domain.entities.user import AuthSession


class AuthApiPort(ABC):
    @abstractmethod
    def login(self, email: str, password: str) -> AuthSession:
        raise NotImplementedError

    @abstractmethod
    def register(self, name: str, email: str, password: str, role: str) -> AuthSession:
        raise NotImplementedError

    @abstractmethod
    def logout(self) -> None:
        raise NotImplementedError
