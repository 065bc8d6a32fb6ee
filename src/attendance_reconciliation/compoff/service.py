from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.availability import FeatureAvailability
from ..core.exceptions import AuthorizationError, NotFoundError, RelationNotFoundError
from ..users.repository import UserRepository
from .model import CompOffLog
from .repository import CompOffRepository

logger = logging.getLogger(__name__)


class CompOffService:
    def __init__(self, logs: CompOffRepository, users: UserRepository, *, granting_role: str):
        self._logs = logs
        self._users = users
        self._granting_role = granting_role

    def list_for_user(self, user_id: int) -> tuple[FeatureAvailability, Sequence[CompOffLog]]:
        try:
            return FeatureAvailability.enabled(), self._logs.list_logs(user_ids=[int(user_id)])
        except RelationNotFoundError as e:
            logger.warning("Comp-off history unavailable: %s", e)
            return FeatureAvailability.disabled(str(e)), []

    def grant(self, *, granted_by_id: int, user_id: int, date_earned: date, reason: str) -> int:
        """Raises RelationNotFoundError when the deployment has no comp-off table."""

        granter = self._users.get_by_id(int(granted_by_id))
        if not granter or granter.role != self._granting_role:
            raise AuthorizationError("You are not allowed to grant comp-off")
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee does not exist")

        return self._logs.add_log(
            user_id=user.user_id,
            user_name=user.name,
            date_earned=date_earned,
            reason=require_non_empty(reason, "Reason"),
            granted_by_id=granter.user_id,
            granted_by_name=granter.name,
        )
