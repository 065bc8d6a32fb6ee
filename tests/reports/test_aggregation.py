import dataclasses
from datetime import date, datetime

from attendance_reconciliation.compoff.model import CompOffLog
from attendance_reconciliation.core.availability import FeatureAvailability
from attendance_reconciliation.core.enums import CompOffStatus, DailyStatusCode
from attendance_reconciliation.reports import aggregation
from attendance_reconciliation.reports.labels import MUSTER_CODES, code_from_label, code_from_muster

from week_data import TODAY, WEEK_END, WEEK_START
from fakes import ALICE, BOB, ev


def test_muster_codes_for_the_week(week_inputs):
    grid = aggregation.compute_muster(week_inputs, WEEK_START, WEEK_END, TODAY)

    assert len(grid.days) == 7
    assert [r.user_name for r in grid.rows] == ["Alice", "Bob"]
    assert grid.rows[0].codes == ("P", "HD", "A", "A", "H", "WO", "WO")
    assert grid.rows[1].codes == ("P", "L", "SH", "A", "A", "WO", "WO")
    assert grid.rows[1].totals["A"] == 2
    assert grid.rows[1].totals["WO"] == 2
    assert sum(grid.rows[0].totals.values()) == 7


def test_basic_report_rows(week_inputs):
    rows = aggregation.compute_basic_report(week_inputs, WEEK_START, WEEK_END, TODAY)

    assert len(rows) == 14
    monday = rows[0]
    assert (monday.user_name, monday.status, monday.check_in, monday.check_out, monday.duration) == (
        "Alice",
        "Present",
        "09:00",
        "17:30",
        "8h 30m",
    )
    wednesday = rows[2]
    assert wednesday.status == "Absent"
    assert wednesday.check_in == "09:00"
    assert wednesday.duration is None


def test_basic_report_and_muster_agree(week_inputs):
    rows = aggregation.compute_basic_report(week_inputs, WEEK_START, WEEK_END, TODAY)
    grid = aggregation.compute_muster(week_inputs, WEEK_START, WEEK_END, TODAY)

    muster = {
        (r.user_id, day): code
        for r in grid.rows
        for day, code in zip(grid.days, r.codes)
    }
    for row in rows:
        assert code_from_label(row.status) == row.code
        assert code_from_muster(muster[(row.user_id, row.work_date)]) == row.code
        assert MUSTER_CODES[row.code] == muster[(row.user_id, row.work_date)]


def test_dashboard_snapshot_is_end_date(week_inputs):
    summary = aggregation.compute_dashboard(week_inputs, WEEK_START, date(2025, 10, 7), TODAY)

    assert summary.total_employees == 2
    assert summary.present_on_end_date == 1
    assert summary.absent_on_end_date == 0
    assert summary.on_leave_on_end_date == 1
    assert [(p.day, p.present, p.absent) for p in summary.trend] == [
        (date(2025, 10, 6), 2, 0),
        (date(2025, 10, 7), 1, 0),
    ]
    assert summary.productivity_trend[0].average_minutes == 525.0
    assert summary.productivity_trend[0].average_hours == 8.75
    assert summary.productivity_trend[1].average_minutes == 270.0


def test_dashboard_counts_open_session_today_as_present(week_inputs):
    summary = aggregation.compute_dashboard(week_inputs, WEEK_START, date(2025, 10, 8), date(2025, 10, 8))

    # Alice is still clocked in, Bob worked short hours.
    assert summary.present_on_end_date == 2
    assert summary.productivity_trend[-1].average_minutes == 180.0


def test_dashboard_comp_off_panel(week_inputs):
    log = CompOffLog(log_id=1, user_id=ALICE.user_id, date_earned=date(2025, 9, 6), reason="Weekend deploy",
                     status=CompOffStatus.EARNED)
    inputs = dataclasses.replace(
        week_inputs,
        comp_off_logs=(log, dataclasses.replace(log, log_id=2, status=CompOffStatus.USED)),
        comp_off=FeatureAvailability.enabled(),
    )

    panel = aggregation.compute_dashboard(inputs, WEEK_START, WEEK_END, TODAY).comp_off

    assert panel.availability.available
    assert (panel.earned, panel.used) == (1, 1)


def test_dashboard_without_comp_off(week_inputs):
    panel = aggregation.compute_dashboard(week_inputs, WEEK_START, WEEK_END, TODAY).comp_off

    assert not panel.availability.available
    assert (panel.earned, panel.used) == (0, 0)


def test_reports_are_idempotent(week_inputs):
    first = aggregation.evaluate(week_inputs, WEEK_START, WEEK_END, TODAY)
    second = aggregation.evaluate(week_inputs, WEEK_START, WEEK_END, TODAY)

    assert first == second
    assert [s.code for s in first if s.user_id == BOB.user_id][3] == DailyStatusCode.ABSENT


def test_event_log_is_sorted_and_names_unknown_users(week_inputs):
    inputs = dataclasses.replace(
        week_inputs,
        events=week_inputs.events
        + (
            ev(99, datetime(2025, 10, 6, 8, 0), "check-in", event_id=50),
            ev(ALICE.user_id, "garbage", "check-in", event_id=51),
            ev(ALICE.user_id, datetime(2025, 10, 20, 9, 0), "check-in", event_id=52),
        ),
    )

    rows = aggregation.collect_event_log(inputs, WEEK_START, WEEK_END)

    assert rows[0].user_name == "Unknown"
    assert [r.timestamp for r in rows] == sorted(r.timestamp for r in rows)
    assert {r.event_id for r in rows} == set(range(1, 10)) | {50}
