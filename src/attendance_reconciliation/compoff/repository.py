from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import CompOffLog


class CompOffRepository(Protocol):
    """Optional relation: every method may raise RelationNotFoundError."""

    def list_logs(self, *, user_ids: Optional[Sequence[int]] = None) -> Sequence[CompOffLog]:
        raise NotImplementedError

    def add_log(
        self,
        *,
        user_id: int,
        user_name: Optional[str],
        date_earned: date,
        reason: str,
        granted_by_id: Optional[int],
        granted_by_name: Optional[str],
    ) -> int:
        raise NotImplementedError

    def consume_earned(self, *, user_id: int, leave_request_id: int) -> Optional[int]:
        """Mark one earned log of the user as used; returns its id or None when none is left."""

        raise NotImplementedError
