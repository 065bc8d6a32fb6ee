from datetime import date

import pytest

from attendance_reconciliation.core.exceptions import AggregationError, ValidationError
from attendance_reconciliation.reports.loader import ReportInputLoader
from attendance_reconciliation.reports.service import ReportService
from attendance_reconciliation.users.model import User

from fakes import ALICE, BOB, FakeCompOff, FakeEvents, FakeLeaves, FakePolicies, FakeUsers
from week_data import TODAY, WEEK_END, WEEK_START, week_events, week_holidays, week_leaves

ZOE = User(user_id=5, name="Aaron", role="driver")


class BrokenEvents(FakeEvents):
    def list_events(self, *, start, end, user_ids=None):
        raise ConnectionError("lost connection to MySQL server")


def _loader(events=None, comp_off=None, users=(BOB, ALICE, ZOE)):
    return ReportInputLoader(
        FakeUsers(users),
        events or FakeEvents(week_events()),
        FakeLeaves(week_leaves()),
        FakePolicies(holidays=week_holidays()),
        comp_off or FakeCompOff(),
        max_workers=3,
    )


def test_loader_sorts_users_and_fetches_whole_days():
    events = FakeEvents(week_events())

    inputs = _loader(events=events).load(start=WEEK_START, end=WEEK_END)

    assert [u.name for u in inputs.users] == ["Aaron", "Alice", "Bob"]
    assert len(inputs.events) == 9
    start, end, user_ids = events.calls[0]
    assert (start.date(), start.hour, end.date(), end.hour) == (WEEK_START, 0, WEEK_END, 23)
    assert user_ids is None
    # Only the approved request overlapping the range is loaded.
    assert [r.request_id for r in inputs.leave_requests] == [1]


def test_loader_scopes_to_requested_users():
    inputs = _loader().load(start=WEEK_START, end=WEEK_END, user_ids=[BOB.user_id])

    assert [u.user_id for u in inputs.users] == [BOB.user_id]
    assert {e.user_id for e in inputs.events} == {BOB.user_id}


def test_any_failed_fetch_aborts_the_run():
    loader = _loader(events=BrokenEvents())

    with pytest.raises(AggregationError) as err:
        loader.load(start=WEEK_START, end=WEEK_END)
    assert err.value.retryable
    assert isinstance(err.value.__cause__, ConnectionError)


def test_missing_comp_off_relation_only_disables_the_panel():
    inputs = _loader(comp_off=FakeCompOff(missing=True)).load(
        start=WEEK_START, end=WEEK_END, include_comp_off=True
    )

    assert not inputs.comp_off.available
    assert inputs.comp_off_logs is None
    assert len(inputs.users) == 3


def test_comp_off_not_loaded_unless_asked():
    inputs = _loader().load(start=WEEK_START, end=WEEK_END)

    assert not inputs.comp_off.available
    assert inputs.comp_off.reason == "comp-off history not requested"


def test_service_dashboard_and_muster():
    svc = ReportService(_loader(users=(ALICE, BOB)))

    summary = svc.dashboard(start=WEEK_START, end=date(2025, 10, 10), today=TODAY)
    grid = svc.muster(start=WEEK_START, end=WEEK_END, today=TODAY)

    assert summary.total_employees == 2
    assert summary.absent_on_end_date == 1
    assert summary.comp_off.availability.available
    assert [r.codes[4] for r in grid.rows] == ["H", "A"]


def test_service_event_log_and_basic_report_share_scope():
    svc = ReportService(_loader(users=(ALICE, BOB)))

    log = svc.event_log(start=WEEK_START, end=WEEK_END, user_ids=[ALICE.user_id])
    rows = svc.basic_report(start=WEEK_START, end=WEEK_END, today=TODAY, user_ids=[ALICE.user_id])

    assert {r.user_id for r in log} == {ALICE.user_id}
    assert len(rows) == 7


@pytest.mark.parametrize(
    "start,end",
    [
        (date(2025, 10, 12), date(2025, 10, 6)),
        (date(2024, 1, 1), date(2025, 10, 6)),
    ],
)
def test_service_rejects_bad_ranges(start, end):
    svc = ReportService(_loader(), max_report_days=366)

    with pytest.raises(ValidationError):
        svc.basic_report(start=start, end=end, today=TODAY)
