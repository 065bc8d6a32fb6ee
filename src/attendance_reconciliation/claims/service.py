from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_min_length, require_non_empty
from ..compoff.repository import CompOffRepository
from ..core.constants import DEFAULT_HISTORY_LIMIT, MIN_CLAIM_REASON_LENGTH, MIN_OVERTIME_HOURS
from ..core.enums import ClaimStatus, ClaimType, WorkType
from ..core.exceptions import AuthorizationError, NotFoundError, StateTransitionError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import ExtraWorkClaim
from .repository import ExtraWorkClaimRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewExtraWorkClaim:
    work_date: date
    work_type: WorkType
    claim_type: ClaimType
    reason: str
    hours_worked: Optional[float] = None


class ExtraWorkClaimService:
    """Overtime and comp-off claims for work outside the normal calendar.

    An approved Comp Off claim earns one comp-off day in the comp-off ledger.
    """

    def __init__(
        self,
        claims: ExtraWorkClaimRepository,
        users: UserRepository,
        comp_off: CompOffRepository,
        *,
        approver_roles: Iterable[str],
        clock: Callable[[], datetime] = now_local,
    ):
        self._claims = claims
        self._users = users
        self._comp_off = comp_off
        self._approver_roles = frozenset(approver_roles)
        self._clock = clock

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee does not exist")
        return user

    def _require_approver(self, approver_id: int) -> User:
        approver = self._require_user(approver_id)
        if approver.role not in self._approver_roles:
            raise AuthorizationError("You are not allowed to decide extra-work claims")
        return approver

    def _require_pending(self, claim_id: int) -> ExtraWorkClaim:
        claim = self._claims.get(int(claim_id))
        if not claim:
            raise NotFoundError("Claim does not exist")
        if claim.status != ClaimStatus.PENDING:
            raise StateTransitionError(f"Claim is already {claim.status.value}")
        return claim

    def submit(self, *, user_id: int, data: NewExtraWorkClaim) -> ExtraWorkClaim:
        user = self._require_user(user_id)
        now = self._clock()

        if data.work_date > now.date():
            raise ValidationError("Date of work cannot be in the future")
        reason = require_min_length(data.reason or "", "Reason", MIN_CLAIM_REASON_LENGTH)

        hours = data.hours_worked
        if data.claim_type == ClaimType.OT:
            if hours is None:
                raise ValidationError("Hours are required for OT claims")
            if hours < MIN_OVERTIME_HOURS:
                raise ValidationError(f"Minimum {MIN_OVERTIME_HOURS} hours")

        claim = ExtraWorkClaim(
            claim_id=0,
            user_id=user.user_id,
            user_name=user.name,
            work_date=data.work_date,
            work_type=data.work_type,
            claim_type=data.claim_type,
            reason=reason,
            status=ClaimStatus.PENDING,
            created_at=now,
            hours_worked=float(hours) if hours is not None else None,
        )
        claim_id = self._claims.create(claim)
        logger.info("Extra-work claim %s by user %s (%s)", claim_id, user.user_id, data.claim_type.value)
        return self._claims.get(claim_id)

    def list_mine(self, *, user_id: int) -> Sequence[ExtraWorkClaim]:
        return self._claims.list_claims(user_id=int(user_id), limit=DEFAULT_HISTORY_LIMIT)

    def list_pending(self, *, approver_id: int) -> Sequence[ExtraWorkClaim]:
        self._require_approver(approver_id)
        return self._claims.list_claims(status=ClaimStatus.PENDING, limit=DEFAULT_HISTORY_LIMIT)

    def _save(
        self,
        claim: ExtraWorkClaim,
        approver: User,
        status: ClaimStatus,
        rejection_reason: Optional[str] = None,
    ) -> None:
        ok = self._claims.save_decision(
            claim_id=claim.claim_id,
            status=status,
            approver_id=approver.user_id,
            approver_name=approver.name,
            decided_at=self._clock(),
            rejection_reason=rejection_reason,
        )
        if not ok:
            raise StateTransitionError("Claim was already decided by someone else")
        logger.info("Extra-work claim %s %s by user %s", claim.claim_id, status.value, approver.user_id)

    def approve(self, *, approver_id: int, claim_id: int) -> ExtraWorkClaim:
        """Raises RelationNotFoundError, before deciding, when a Comp Off claim has no ledger to land in."""

        approver = self._require_approver(approver_id)
        claim = self._require_pending(claim_id)

        if claim.claim_type == ClaimType.COMP_OFF:
            self._comp_off.list_logs(user_ids=[claim.user_id])

        self._save(claim, approver, ClaimStatus.APPROVED)

        if claim.claim_type == ClaimType.COMP_OFF:
            self._comp_off.add_log(
                user_id=claim.user_id,
                user_name=claim.user_name,
                date_earned=claim.work_date,
                reason=f"Claim approved: {claim.reason}",
                granted_by_id=approver.user_id,
                granted_by_name=approver.name,
            )
        return self._claims.get(claim.claim_id)

    def reject(self, *, approver_id: int, claim_id: int, reason: str) -> ExtraWorkClaim:
        approver = self._require_approver(approver_id)
        claim = self._require_pending(claim_id)
        rejection_reason = require_non_empty(reason or "", "Rejection reason")

        self._save(claim, approver, ClaimStatus.REJECTED, rejection_reason)
        return self._claims.get(claim.claim_id)
