from abc import ABC, abstractmethod

from expert_booking.domain.entities.user import AuthSession


class SessionStorePort(ABC):
    @abstractmethod
    def get(self) -> AuthSession | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, session: AuthSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def update_token(self, token: str) -> None:
        """Replace the access token of the current session, keeping the user."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError
