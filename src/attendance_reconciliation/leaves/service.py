from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import inclusive_day_count, now_local
from ..common.validators import require_min_length
from ..compoff.repository import CompOffRepository
from ..core.availability import FeatureAvailability
from ..core.constants import DEFAULT_HISTORY_LIMIT, MIN_LEAVE_REASON_LENGTH
from ..core.enums import DayOption, Decision, LeaveStatus, LeaveType
from ..core.exceptions import NotFoundError, RelationNotFoundError, StateTransitionError, ValidationError
from ..policy.repository import PolicyRepository
from ..users.model import User
from ..users.repository import UserRepository
from . import workflow
from .balance import compute_leave_balance
from .model import LeaveBalance, LeaveFilter, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewLeaveRequest:
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    day_option: DayOption = DayOption.FULL
    attachment: Optional[str] = None


class LeaveService:
    """Leave lifecycle: submission, the two approval stages and balances."""

    def __init__(
        self,
        leaves: LeaveRepository,
        users: UserRepository,
        policies: PolicyRepository,
        comp_off: CompOffRepository,
        *,
        final_confirmation_role: str,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._users = users
        self._policies = policies
        self._comp_off = comp_off
        self._final_role = final_confirmation_role
        self._clock = clock

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee does not exist")
        return user

    def _require_request(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get(int(request_id))
        if not req:
            raise NotFoundError("Leave request does not exist")
        return req

    def _validate(self, requester: User, data: NewLeaveRequest) -> str:
        if data.end_date < data.start_date:
            raise ValidationError("End date must be on or after start date")

        reason = require_min_length(data.reason or "", "Reason", MIN_LEAVE_REASON_LENGTH)

        days = inclusive_day_count(data.start_date, data.end_date)
        if data.day_option == DayOption.HALF and days != 1:
            raise ValidationError("Half-day leave must start and end on the same day")

        if data.leave_type == LeaveType.SICK:
            policy = self._policies.get_attendance_policy().for_staff_type(requester.staff_type)
            threshold = policy.sick_leave_certificate_threshold_days
            if days > threshold and not (data.attachment or "").strip():
                raise ValidationError(
                    f"A doctor's certificate is required for sick leave longer than {threshold} days"
                )
        return reason

    def submit(self, *, user_id: int, data: NewLeaveRequest) -> LeaveRequest:
        requester = self._require_user(user_id)
        reason = self._validate(requester, data)

        draft = LeaveRequest(
            request_id=0,
            user_id=requester.user_id,
            user_name=requester.name,
            leave_type=data.leave_type,
            start_date=data.start_date,
            end_date=data.end_date,
            day_option=data.day_option,
            reason=reason,
            status=LeaveStatus.SUBMITTED,
            created_at=self._clock(),
            attachment=(data.attachment or "").strip() or None,
        )
        final_approver = None
        if requester.reporting_manager_id is None:
            final_approver = self._users.find_first_by_role(self._final_role)
        routed = workflow.route_submission(draft, requester=requester, final_approver=final_approver)

        request_id = self._leaves.create(routed)
        logger.info("Leave request %s by user %s entered %s", request_id, requester.user_id, routed.status.value)
        return self._require_request(request_id)

    def _persist(self, before: LeaveRequest, after: LeaveRequest) -> LeaveRequest:
        ok = self._leaves.save_transition(
            request_id=before.request_id,
            expected_status=before.status,
            status=after.status,
            current_approver_id=after.current_approver_id,
            approval_history=after.approval_history,
        )
        if not ok:
            raise StateTransitionError("Leave request was already decided by someone else")
        logger.info("Leave request %s: %s -> %s", before.request_id, before.status.value, after.status.value)
        return after

    def decide_as_manager(
        self,
        *,
        approver_id: int,
        request_id: int,
        approve: bool,
        comments: str = "",
    ) -> LeaveRequest:
        req = self._require_request(request_id)
        approver = self._require_user(approver_id)
        requester = self._require_user(req.user_id)

        decided = workflow.decide_as_manager(
            req,
            requester=requester,
            approver=approver,
            decision=Decision.APPROVED if approve else Decision.REJECTED,
            final_approver=self._users.find_first_by_role(self._final_role) if approve else None,
            now=self._clock(),
            comments=comments,
        )
        return self._persist(req, decided)

    def decide_as_final(
        self,
        *,
        approver_id: int,
        request_id: int,
        approve: bool,
        comments: str = "",
    ) -> LeaveRequest:
        req = self._require_request(request_id)
        approver = self._require_user(approver_id)

        decided = workflow.decide_as_final(
            req,
            approver=approver,
            decision=Decision.APPROVED if approve else Decision.REJECTED,
            final_confirmation_role=self._final_role,
            now=self._clock(),
            comments=comments,
        )
        decided = self._persist(req, decided)

        if decided.status == LeaveStatus.APPROVED and decided.leave_type == LeaveType.COMP_OFF:
            self._consume_comp_off(decided)
        return decided

    def _consume_comp_off(self, req: LeaveRequest) -> None:
        try:
            log_id = self._comp_off.consume_earned(user_id=req.user_id, leave_request_id=req.request_id)
        except RelationNotFoundError as e:
            logger.warning("Comp-off leave %s approved without a comp-off ledger: %s", req.request_id, e)
            return
        if log_id is None:
            logger.warning("Comp-off leave %s approved but user %s had no earned comp-off", req.request_id, req.user_id)

    def list_my_requests(self, *, user_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(LeaveFilter(user_id=int(user_id)), limit=DEFAULT_HISTORY_LIMIT)

    def list_pending_for(self, *, approver_id: int) -> Sequence[LeaveRequest]:
        """Requests assigned to the approver plus, for the final role, every request awaiting it.

        The final step belongs to the role, so a request routed to another holder (or to
        nobody) is still listed for each user holding it.
        """

        assigned = self._leaves.list_requests(LeaveFilter(approver_id=int(approver_id)), limit=DEFAULT_HISTORY_LIMIT)
        pending = [r for r in assigned if not r.status.is_terminal]

        approver = self._users.get_by_id(int(approver_id))
        if approver and approver.role == self._final_role:
            seen = {r.request_id for r in pending}
            awaiting = self._leaves.list_requests(
                LeaveFilter(status=LeaveStatus.PENDING_HR_CONFIRMATION), limit=DEFAULT_HISTORY_LIMIT
            )
            pending.extend(r for r in awaiting if r.request_id not in seen)
            pending.sort(key=lambda r: (r.created_at, r.request_id), reverse=True)
        return pending

    def get_leave_balance(self, *, user_id: int) -> LeaveBalance:
        user = self._require_user(user_id)
        policy = self._policies.get_attendance_policy().for_staff_type(user.staff_type)
        approved = self._leaves.list_requests(LeaveFilter(user_id=user.user_id, status=LeaveStatus.APPROVED))

        try:
            logs = self._comp_off.list_logs(user_ids=[user.user_id])
            availability = FeatureAvailability.enabled()
        except RelationNotFoundError as e:
            logger.warning("Comp-off balance unavailable: %s", e)
            logs, availability = None, FeatureAvailability.disabled(str(e))

        return compute_leave_balance(
            user_id=user.user_id,
            policy=policy,
            requests=approved,
            comp_off_logs=logs,
            comp_off=availability,
        )
