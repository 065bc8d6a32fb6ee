from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import ApprovalRecord, LeaveFilter, LeaveRequest


class LeaveRepository(Protocol):
    def create(self, request: LeaveRequest) -> int:
        """Persist a freshly routed request (request_id is ignored); returns the new id."""

        raise NotImplementedError

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(self, leave_filter: LeaveFilter, *, limit: Optional[int] = None) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def save_transition(
        self,
        *,
        request_id: int,
        expected_status: LeaveStatus,
        status: LeaveStatus,
        current_approver_id: Optional[int],
        approval_history: Sequence[ApprovalRecord],
    ) -> bool:
        """Compare-and-set on status; False when someone else decided first."""

        raise NotImplementedError
