from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def list_users(self) -> Sequence[User]:
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def find_first_by_role(self, role: str) -> Optional[User]:
        raise NotImplementedError
