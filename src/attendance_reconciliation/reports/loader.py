from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceEventRepository
from ..common.datetime_utils import day_bounds
from ..compoff.repository import CompOffRepository
from ..core.availability import FeatureAvailability
from ..core.constants import DEFAULT_FETCH_WORKERS
from ..core.enums import LeaveStatus
from ..core.exceptions import AggregationError, RelationNotFoundError
from ..leaves.model import LeaveFilter
from ..leaves.repository import LeaveRepository
from ..policy.model import HolidayCalendar
from ..policy.repository import PolicyRepository
from ..users.repository import UserRepository
from .inputs import ReconciliationInputs

logger = logging.getLogger(__name__)


class ReportInputLoader:
    """Issues one batched fetch per data set, concurrently, before any derivation runs.

    The run is all-or-nothing: any failed fetch raises AggregationError, except a
    missing comp-off relation which only disables the comp-off panel.
    """

    def __init__(
        self,
        users: UserRepository,
        events: AttendanceEventRepository,
        leaves: LeaveRepository,
        policies: PolicyRepository,
        comp_off: CompOffRepository,
        *,
        max_workers: int = DEFAULT_FETCH_WORKERS,
    ):
        self._users = users
        self._events = events
        self._leaves = leaves
        self._policies = policies
        self._comp_off = comp_off
        self._max_workers = max(int(max_workers), 1)

    def load(
        self,
        *,
        start: date,
        end: date,
        user_ids: Optional[Sequence[int]] = None,
        include_comp_off: bool = False,
    ) -> ReconciliationInputs:
        ids = tuple(sorted({int(u) for u in user_ids})) if user_ids is not None else None
        window_start, window_end = day_bounds(start, end)
        leave_filter = LeaveFilter(user_ids=ids, start_date=start, end_date=end, status=LeaveStatus.APPROVED)

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            f_users = pool.submit(self._users.list_users)
            f_events = pool.submit(self._events.list_events, start=window_start, end=window_end, user_ids=ids)
            f_leaves = pool.submit(self._leaves.list_requests, leave_filter)
            f_policy = pool.submit(self._policies.get_attendance_policy)
            f_holidays = pool.submit(self._policies.get_holidays)
            f_comp_off = pool.submit(self._comp_off.list_logs, user_ids=ids) if include_comp_off else None

            try:
                users = f_users.result()
                events = f_events.result()
                leaves = f_leaves.result()
                policies = f_policy.result()
                holidays = f_holidays.result()
            except Exception as e:
                logger.exception("Attendance report fetch failed")
                raise AggregationError("Could not load attendance data, please retry") from e

            comp_off_logs = None
            comp_off = FeatureAvailability.disabled("comp-off history not requested")
            if f_comp_off is not None:
                try:
                    comp_off_logs = tuple(f_comp_off.result())
                    comp_off = FeatureAvailability.enabled()
                except RelationNotFoundError as e:
                    logger.warning("Comp-off panel disabled: %s", e)
                    comp_off = FeatureAvailability.disabled(str(e))
                except Exception as e:
                    logger.exception("Comp-off fetch failed")
                    raise AggregationError("Could not load attendance data, please retry") from e

        if ids is not None:
            wanted = set(ids)
            users = [u for u in users if u.user_id in wanted]

        return ReconciliationInputs(
            users=tuple(sorted(users, key=lambda u: (u.name, u.user_id))),
            events=tuple(events),
            leave_requests=tuple(leaves),
            holidays=HolidayCalendar.from_holidays(holidays),
            policies=policies,
            comp_off_logs=comp_off_logs,
            comp_off=comp_off,
        )
