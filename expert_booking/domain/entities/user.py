from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: str = "client"  # "client" | "expert"


@dataclass(frozen=True)
class AuthSession:
    user: User
    token: str
    refresh_token: str | None = None
