from src.domain.entities import User


class InMemoryAuthProvider:
    """Session-token to user lookup for development and tests."""

    def __init__(self) -> None:
        self._sessions: dict[str, User] = {}

    def sign_in(self, token: str, user: User) -> None:
        self._sessions[token] = user

    def sign_out(self, token: str) -> None:
        self._sessions.pop(token, None)

    def get_current_user(self, token: str | None) -> User | None:
        if not token:
            return None
        return self._sessions.get(token)
