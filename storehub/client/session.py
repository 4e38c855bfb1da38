from __future__ import annotations

from dataclasses import dataclass

from ..stores.models import User


@dataclass
class Session:
    """The logged-in user as seen by the client, or nobody."""

    user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def sign_in(self, user: User) -> None:
        self.user = user

    def sign_out(self) -> None:
        self.user = None
