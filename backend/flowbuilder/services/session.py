"""Session lookup used to gate workflow creation."""

from typing import Protocol


class SessionProvider(Protocol):
    """Reports the signed-in user, if any."""

    async def current_user(self) -> str | None: ...


class StaticSessionProvider:
    """Session provider with a fixed (possibly absent) user."""

    def __init__(self, user_id: str | None = None) -> None:
        self.user_id = user_id

    async def current_user(self) -> str | None:
        return self.user_id

    def sign_in(self, user_id: str) -> None:
        self.user_id = user_id

    def sign_out(self) -> None:
        self.user_id = None
