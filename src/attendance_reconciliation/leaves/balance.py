from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..compoff.model import CompOffLog
from ..core.availability import FeatureAvailability
from ..core.constants import FLOATING_LEAVE_MONTHS
from ..core.enums import CompOffStatus, LeaveStatus, LeaveType
from ..policy.model import AttendancePolicy
from .model import LeaveBalance, LeaveBalanceEntry, LeaveRequest


def compute_leave_balance(
    *,
    user_id: int,
    policy: AttendancePolicy,
    requests: Iterable[LeaveRequest],
    comp_off_logs: Optional[Sequence[CompOffLog]],
    comp_off: FeatureAvailability,
) -> LeaveBalance:
    """Balance as of now, recomputed from approved requests.

    ``used`` only ever reflects APPROVED requests; nothing here blocks a submission that
    would overdraw a balance. Comp-off is counted from the log table when it exists.
    """

    used = {LeaveType.EARNED: 0.0, LeaveType.SICK: 0.0, LeaveType.FLOATING: 0.0}
    for r in requests:
        if r.user_id != user_id or r.status != LeaveStatus.APPROVED:
            continue
        if r.leave_type in used:
            used[r.leave_type] += r.leave_amount

    entries = {
        LeaveType.EARNED: LeaveBalanceEntry(total=float(policy.annual_earned_leaves), used=used[LeaveType.EARNED]),
        LeaveType.SICK: LeaveBalanceEntry(total=float(policy.annual_sick_leaves), used=used[LeaveType.SICK]),
        LeaveType.FLOATING: LeaveBalanceEntry(
            total=float(policy.monthly_floating_leaves) * FLOATING_LEAVE_MONTHS,
            used=used[LeaveType.FLOATING],
        ),
    }

    if comp_off.available and comp_off_logs is not None:
        mine = [log for log in comp_off_logs if log.user_id == user_id]
        entries[LeaveType.COMP_OFF] = LeaveBalanceEntry(
            total=float(len(mine)),
            used=float(sum(1 for log in mine if log.status == CompOffStatus.USED)),
        )

    return LeaveBalance(user_id=user_id, entries=entries, comp_off=comp_off)
