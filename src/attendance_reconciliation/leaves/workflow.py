"""Leave approval state machine.

    SUBMITTED -> PENDING_MANAGER_APPROVAL -> PENDING_HR_CONFIRMATION -> APPROVED
    SUBMITTED -> PENDING_HR_CONFIRMATION            (no reporting manager)
    PENDING_MANAGER_APPROVAL | PENDING_HR_CONFIRMATION -> REJECTED

All functions here are pure: they return a new LeaveRequest and never persist.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Optional

from ..core.enums import Decision, LeaveStatus
from ..core.exceptions import AuthorizationError, StateTransitionError
from ..users.model import User
from .model import ApprovalRecord, LeaveRequest

ALLOWED_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.SUBMITTED: frozenset({LeaveStatus.PENDING_MANAGER_APPROVAL, LeaveStatus.PENDING_HR_CONFIRMATION}),
    LeaveStatus.PENDING_MANAGER_APPROVAL: frozenset({LeaveStatus.PENDING_HR_CONFIRMATION, LeaveStatus.REJECTED}),
    LeaveStatus.PENDING_HR_CONFIRMATION: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED}),
    LeaveStatus.APPROVED: frozenset(),
    LeaveStatus.REJECTED: frozenset(),
}


def ensure_transition(current: LeaveStatus, target: LeaveStatus) -> None:
    if current.is_terminal:
        raise StateTransitionError(f"Leave request is already {current.value}")
    if target not in ALLOWED_TRANSITIONS[current]:
        raise StateTransitionError(f"Cannot move leave request from {current.value} to {target.value}")


def route_submission(request: LeaveRequest, *, requester: User, final_approver: Optional[User]) -> LeaveRequest:
    """Leave SUBMITTED: manager step when a reporting manager exists, else straight to HR."""

    if requester.reporting_manager_id is not None:
        target, approver_id = LeaveStatus.PENDING_MANAGER_APPROVAL, requester.reporting_manager_id
    else:
        target, approver_id = LeaveStatus.PENDING_HR_CONFIRMATION, (final_approver.user_id if final_approver else None)

    ensure_transition(request.status, target)
    return dataclasses.replace(request, status=target, current_approver_id=approver_id)


def _ensure_awaiting(request: LeaveRequest, stage: LeaveStatus, label: str) -> None:
    if request.status.is_terminal:
        raise StateTransitionError(f"Leave request is already {request.status.value}")
    if request.status != stage:
        raise StateTransitionError(f"Leave request is not awaiting {label}")


def _record(approver: User, decision: Decision, now: datetime, comments: Optional[str]) -> ApprovalRecord:
    return ApprovalRecord(
        approver_id=approver.user_id,
        approver_name=approver.name,
        decision=decision,
        timestamp=now,
        comments=(comments or "").strip() or None,
    )


def decide_as_manager(
    request: LeaveRequest,
    *,
    requester: User,
    approver: User,
    decision: Decision,
    final_approver: Optional[User],
    now: datetime,
    comments: Optional[str] = None,
) -> LeaveRequest:
    _ensure_awaiting(request, LeaveStatus.PENDING_MANAGER_APPROVAL, "manager approval")
    if requester.reporting_manager_id != approver.user_id:
        raise AuthorizationError("Only the reporting manager can decide this request")

    if decision == Decision.APPROVED:
        target = LeaveStatus.PENDING_HR_CONFIRMATION
        next_approver = final_approver.user_id if final_approver else None
    else:
        target = LeaveStatus.REJECTED
        next_approver = None

    ensure_transition(request.status, target)
    return dataclasses.replace(
        request,
        status=target,
        current_approver_id=next_approver,
        approval_history=request.approval_history + (_record(approver, decision, now, comments),),
    )


def decide_as_final(
    request: LeaveRequest,
    *,
    approver: User,
    decision: Decision,
    final_confirmation_role: str,
    now: datetime,
    comments: Optional[str] = None,
) -> LeaveRequest:
    _ensure_awaiting(request, LeaveStatus.PENDING_HR_CONFIRMATION, "final confirmation")
    if approver.role != final_confirmation_role:
        raise AuthorizationError(f"Only the {final_confirmation_role} role can confirm leave")

    target = LeaveStatus.APPROVED if decision == Decision.APPROVED else LeaveStatus.REJECTED
    ensure_transition(request.status, target)
    return dataclasses.replace(
        request,
        status=target,
        current_approver_id=None,
        approval_history=request.approval_history + (_record(approver, decision, now, comments),),
    )
