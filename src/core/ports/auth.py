from typing import Protocol

from src.domain.entities import User


class AuthProviderPort(Protocol):
    def get_current_user(self, token: str | None) -> User | None:
        """Resolve the signed-in user for a session token, or None."""
        ...
