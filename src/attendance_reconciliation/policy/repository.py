from __future__ import annotations

from typing import Protocol, Sequence

from .model import Holiday, PolicySet


class PolicyRepository(Protocol):
    def get_attendance_policy(self) -> PolicySet:
        """Office and field rules; raises if the organization has not configured them."""

        raise NotImplementedError

    def get_holidays(self) -> Sequence[Holiday]:
        """Both calendars; callers split them with HolidayCalendar.from_holidays."""

        raise NotImplementedError
