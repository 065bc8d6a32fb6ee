from datetime import date, datetime, time

import pytest

from attendance_reconciliation.attendance.engine import StatusDerivationEngine, derive_daily_status
from attendance_reconciliation.core.enums import DailyStatusCode, DayOption, StaffType
from attendance_reconciliation.leaves.model import LeaveSpan
from attendance_reconciliation.policy.model import HolidayCalendar

from fakes import ALICE, BOB, ev, holiday, make_policies

MONDAY = date(2025, 10, 6)
SATURDAY = date(2025, 10, 11)
TODAY = date(2025, 10, 20)
NO_HOLIDAYS = HolidayCalendar()


def _derive(user, day, events=(), spans=(), holidays=NO_HOLIDAYS, today=TODAY):
    return derive_daily_status(user, day, list(events), list(spans), holidays, make_policies(), today)


def _punches(user, day, start, end):
    return [
        ev(user.user_id, datetime.combine(day, start), "check-in"),
        ev(user.user_id, datetime.combine(day, end), "check-out"),
    ]


@pytest.mark.parametrize(
    "start,end,expected,minutes",
    [
        (time(9, 0), time(17, 30), DailyStatusCode.PRESENT, 510),
        (time(9, 0), time(17, 0), DailyStatusCode.PRESENT, 480),
        (time(9, 0), time(16, 59), DailyStatusCode.HALF_DAY, 479),
        (time(9, 0), time(13, 30), DailyStatusCode.HALF_DAY, 270),
        (time(9, 0), time(13, 0), DailyStatusCode.HALF_DAY, 240),
        (time(9, 0), time(12, 59), DailyStatusCode.SHORT_HOURS, 239),
        (time(9, 0), time(12, 30), DailyStatusCode.SHORT_HOURS, 210),
    ],
)
def test_worked_minutes_against_office_thresholds(start, end, expected, minutes):
    status = _derive(ALICE, MONDAY, _punches(ALICE, MONDAY, start, end))

    assert status.code == expected
    assert status.worked_minutes == minutes
    assert status.check_in == datetime.combine(MONDAY, start)
    assert status.check_out == datetime.combine(MONDAY, end)


def test_field_staff_use_their_own_thresholds():
    # 8.5h is a full day for office (8h) but only a half day for field staff (9h).
    events = _punches(BOB, MONDAY, time(9, 0), time(17, 30))

    assert _derive(BOB, MONDAY, events).code == DailyStatusCode.HALF_DAY


def test_no_events_on_a_working_day_is_absent():
    status = _derive(ALICE, MONDAY)

    assert status.code == DailyStatusCode.ABSENT
    assert status.check_in is None
    assert status.worked_minutes is None


def test_open_session_on_a_past_day_is_absent():
    status = _derive(ALICE, MONDAY, [ev(ALICE.user_id, datetime(2025, 10, 6, 9, 0))])

    assert status.code == DailyStatusCode.ABSENT
    assert status.check_in == datetime(2025, 10, 6, 9, 0)
    assert status.worked_minutes is None


def test_open_session_today_is_incomplete():
    status = _derive(ALICE, MONDAY, [ev(ALICE.user_id, datetime(2025, 10, 6, 9, 0))], today=MONDAY)

    assert status.code == DailyStatusCode.INCOMPLETE
    assert status.check_out is None


def test_check_out_without_check_in_is_absent():
    status = _derive(ALICE, MONDAY, [ev(ALICE.user_id, datetime(2025, 10, 6, 17, 0), "check-out")])

    assert status.code == DailyStatusCode.ABSENT
    assert status.check_out is None


def test_duplicate_punches_use_earliest_in_and_latest_out():
    events = [
        ev(ALICE.user_id, datetime(2025, 10, 6, 9, 30), "check-in"),
        ev(ALICE.user_id, datetime(2025, 10, 6, 8, 45), "check-in"),
        ev(ALICE.user_id, datetime(2025, 10, 6, 12, 0), "check-out"),
        ev(ALICE.user_id, datetime(2025, 10, 6, 17, 15), "check-out"),
    ]

    status = _derive(ALICE, MONDAY, events)

    assert status.check_in == datetime(2025, 10, 6, 8, 45)
    assert status.check_out == datetime(2025, 10, 6, 17, 15)
    assert status.worked_minutes == 510
    assert status.code == DailyStatusCode.PRESENT


def test_malformed_and_foreign_events_are_ignored():
    events = [
        ev(ALICE.user_id, "not-a-timestamp", "check-in"),
        ev(ALICE.user_id, datetime(2025, 10, 6, 9, 0), "lunch"),
        ev(BOB.user_id, datetime(2025, 10, 6, 9, 0), "check-in"),
        ev(ALICE.user_id, datetime(2025, 10, 7, 9, 0), "check-in"),
    ]

    assert _derive(ALICE, MONDAY, events).code == DailyStatusCode.ABSENT


def test_iso_string_timestamps_are_accepted():
    events = [
        ev(ALICE.user_id, "2025-10-06T09:00:00", "check-in"),
        ev(ALICE.user_id, "2025-10-06T17:00:00Z", "check-out"),
    ]

    status = _derive(ALICE, MONDAY, events)

    assert status.code == DailyStatusCode.PRESENT
    assert status.worked_minutes == 480


def test_approved_leave_beats_punches_holidays_and_weekends():
    spans = [LeaveSpan(user_id=ALICE.user_id, start_date=MONDAY, end_date=SATURDAY)]
    calendar = HolidayCalendar.from_holidays([holiday(MONDAY, StaffType.OFFICE)])
    events = _punches(ALICE, MONDAY, time(9, 0), time(18, 0))

    assert _derive(ALICE, MONDAY, events, spans, calendar).code == DailyStatusCode.ON_LEAVE_FULL
    assert _derive(ALICE, SATURDAY, (), spans, calendar).code == DailyStatusCode.ON_LEAVE_FULL


def test_half_day_leave():
    spans = [LeaveSpan(user_id=ALICE.user_id, start_date=MONDAY, end_date=MONDAY, day_option=DayOption.HALF)]

    assert _derive(ALICE, MONDAY, (), spans).code == DailyStatusCode.ON_LEAVE_HALF


def test_leave_of_another_user_does_not_apply():
    spans = [LeaveSpan(user_id=BOB.user_id, start_date=MONDAY, end_date=MONDAY)]

    assert _derive(ALICE, MONDAY, (), spans).code == DailyStatusCode.ABSENT


def test_holiday_calendar_follows_staff_type():
    calendar = HolidayCalendar.from_holidays([holiday(MONDAY, StaffType.OFFICE, "Founders Day")])

    assert _derive(ALICE, MONDAY, holidays=calendar).code == DailyStatusCode.HOLIDAY
    assert _derive(BOB, MONDAY, holidays=calendar).code == DailyStatusCode.ABSENT


def test_holiday_wins_over_punches():
    calendar = HolidayCalendar.from_holidays([holiday(MONDAY, StaffType.OFFICE, "Founders Day")])
    events = _punches(ALICE, MONDAY, time(9, 0), time(18, 0))

    status = _derive(ALICE, MONDAY, events, holidays=calendar)

    assert status.code == DailyStatusCode.HOLIDAY
    assert status.worked_minutes is None


def test_weekend_wins_over_punches():
    events = _punches(ALICE, SATURDAY, time(9, 0), time(18, 0))

    status = _derive(ALICE, SATURDAY, events)

    assert status.code == DailyStatusCode.WEEK_OFF
    assert status.worked_minutes is None


def test_derivation_is_deterministic():
    engine = StatusDerivationEngine()
    events = _punches(ALICE, MONDAY, time(9, 0), time(13, 30))
    args = (ALICE, MONDAY, events, [], NO_HOLIDAYS, make_policies(), TODAY)

    assert engine.derive(*args) == engine.derive(*args)
