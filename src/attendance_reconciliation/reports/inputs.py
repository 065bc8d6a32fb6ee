from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..attendance.model import AttendanceEvent
from ..compoff.model import CompOffLog
from ..core.availability import FeatureAvailability
from ..core.enums import LeaveStatus
from ..leaves.model import LeaveRequest, LeaveSpan
from ..policy.model import HolidayCalendar, PolicySet
from ..users.model import User


@dataclass(frozen=True)
class ReconciliationInputs:
    """Everything one report run needs, fetched up front and passed explicitly."""

    users: tuple[User, ...]
    events: tuple[AttendanceEvent, ...]
    leave_requests: tuple[LeaveRequest, ...]
    holidays: HolidayCalendar
    policies: PolicySet
    comp_off_logs: Optional[tuple[CompOffLog, ...]] = None
    comp_off: FeatureAvailability = field(
        default_factory=lambda: FeatureAvailability.disabled("comp-off history not requested")
    )

    @property
    def leave_spans(self) -> tuple[LeaveSpan, ...]:
        return tuple(r.to_span() for r in self.leave_requests if r.status == LeaveStatus.APPROVED)
