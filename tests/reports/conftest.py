import pytest

from attendance_reconciliation.policy.model import HolidayCalendar
from attendance_reconciliation.reports.inputs import ReconciliationInputs

from fakes import ALICE, BOB, make_policies
from week_data import week_events, week_holidays, week_leaves


@pytest.fixture
def week_inputs():
    return ReconciliationInputs(
        users=(ALICE, BOB),
        events=week_events(),
        leave_requests=week_leaves(),
        holidays=HolidayCalendar.from_holidays(week_holidays()),
        policies=make_policies(),
    )
