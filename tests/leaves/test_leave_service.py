from datetime import date, datetime

import pytest

from attendance_reconciliation.compoff.model import CompOffLog
from attendance_reconciliation.core.enums import CompOffStatus, Decision, DayOption, LeaveStatus, LeaveType
from attendance_reconciliation.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    StateTransitionError,
    ValidationError,
)
from attendance_reconciliation.leaves.service import LeaveService, NewLeaveRequest

from fakes import ALICE, BOB, CAROL, FIXED_NOW, HANNA, IVAN, FakeCompOff, FakeLeaves, FakePolicies, FakeUsers


def _service(comp_off=None, leaves=None, users=None):
    leaves = leaves or FakeLeaves()
    comp_off = comp_off or FakeCompOff()
    svc = LeaveService(
        leaves,
        users or FakeUsers([ALICE, BOB, CAROL, HANNA]),
        FakePolicies(),
        comp_off,
        final_confirmation_role="hr",
        clock=lambda: FIXED_NOW,
    )
    return svc, leaves, comp_off


def _earned(start=date(2025, 10, 13), end=date(2025, 10, 14), **kwargs):
    return NewLeaveRequest(
        leave_type=kwargs.pop("leave_type", LeaveType.EARNED),
        start_date=start,
        end_date=end,
        reason=kwargs.pop("reason", "Family wedding out of town"),
        **kwargs,
    )


def test_submit_with_reporting_manager_goes_to_manager():
    svc, _, _ = _service()

    req = svc.submit(user_id=BOB.user_id, data=_earned())

    assert req.request_id == 1
    assert req.status == LeaveStatus.PENDING_MANAGER_APPROVAL
    assert req.current_approver_id == CAROL.user_id
    assert req.user_name == "Bob"
    assert req.created_at == FIXED_NOW


def test_submit_without_manager_goes_straight_to_hr():
    svc, _, _ = _service()

    req = svc.submit(user_id=ALICE.user_id, data=_earned())

    assert req.status == LeaveStatus.PENDING_HR_CONFIRMATION
    assert req.current_approver_id == HANNA.user_id


@pytest.mark.parametrize(
    "data",
    [
        _earned(start=date(2025, 10, 14), end=date(2025, 10, 13)),
        _earned(reason="  tired   "),
        _earned(day_option=DayOption.HALF),
    ],
)
def test_submit_validation(data):
    svc, leaves, _ = _service()

    with pytest.raises(ValidationError):
        svc.submit(user_id=BOB.user_id, data=data)
    assert leaves.requests == {}


def test_half_day_single_day_is_accepted():
    svc, _, _ = _service()

    req = svc.submit(
        user_id=BOB.user_id,
        data=_earned(start=date(2025, 10, 13), end=date(2025, 10, 13), day_option=DayOption.HALF),
    )

    assert req.leave_amount == 0.5


def test_long_sick_leave_needs_certificate():
    svc, _, _ = _service()
    four_days = dict(start=date(2025, 10, 13), end=date(2025, 10, 16), leave_type=LeaveType.SICK)

    with pytest.raises(ValidationError):
        svc.submit(user_id=ALICE.user_id, data=_earned(**four_days))

    req = svc.submit(user_id=ALICE.user_id, data=_earned(attachment="certificates/alice.pdf", **four_days))
    assert req.attachment == "certificates/alice.pdf"


def test_sick_threshold_comes_from_requester_staff_type():
    svc, _, _ = _service()
    three_days = dict(start=date(2025, 10, 13), end=date(2025, 10, 15), leave_type=LeaveType.SICK)

    # Office threshold is 3 days, field threshold is 2.
    svc.submit(user_id=ALICE.user_id, data=_earned(**three_days))
    with pytest.raises(ValidationError):
        svc.submit(user_id=BOB.user_id, data=_earned(**three_days))


def test_full_approval_path_records_history():
    svc, _, _ = _service()
    req = svc.submit(user_id=BOB.user_id, data=_earned())

    req = svc.decide_as_manager(approver_id=CAROL.user_id, request_id=req.request_id, approve=True, comments="ok")
    assert req.status == LeaveStatus.PENDING_HR_CONFIRMATION
    assert req.current_approver_id == HANNA.user_id

    req = svc.decide_as_final(approver_id=HANNA.user_id, request_id=req.request_id, approve=True)
    assert req.status == LeaveStatus.APPROVED
    assert req.current_approver_id is None
    assert [(r.approver_id, r.decision) for r in req.approval_history] == [
        (CAROL.user_id, Decision.APPROVED),
        (HANNA.user_id, Decision.APPROVED),
    ]
    assert req.approval_history[0].comments == "ok"


def test_only_reporting_manager_can_decide_first_stage():
    svc, _, _ = _service()
    req = svc.submit(user_id=BOB.user_id, data=_earned())

    with pytest.raises(AuthorizationError):
        svc.decide_as_manager(approver_id=HANNA.user_id, request_id=req.request_id, approve=True)


def test_only_final_role_can_confirm():
    svc, _, _ = _service()
    req = svc.submit(user_id=ALICE.user_id, data=_earned())

    with pytest.raises(AuthorizationError):
        svc.decide_as_final(approver_id=CAROL.user_id, request_id=req.request_id, approve=True)


def test_hr_cannot_skip_manager_stage():
    svc, _, _ = _service()
    req = svc.submit(user_id=BOB.user_id, data=_earned())

    with pytest.raises(StateTransitionError):
        svc.decide_as_final(approver_id=HANNA.user_id, request_id=req.request_id, approve=True)


def test_terminal_requests_cannot_be_decided_again():
    svc, _, _ = _service()
    req = svc.submit(user_id=BOB.user_id, data=_earned())
    req = svc.decide_as_manager(approver_id=CAROL.user_id, request_id=req.request_id, approve=False)
    assert req.status == LeaveStatus.REJECTED

    with pytest.raises(StateTransitionError):
        svc.decide_as_manager(approver_id=CAROL.user_id, request_id=req.request_id, approve=True)
    with pytest.raises(StateTransitionError):
        svc.decide_as_final(approver_id=HANNA.user_id, request_id=req.request_id, approve=True)


def test_concurrent_decision_is_reported_as_conflict():
    svc, leaves, _ = _service()
    req = svc.submit(user_id=ALICE.user_id, data=_earned())
    leaves.stale_writes = True

    with pytest.raises(StateTransitionError):
        svc.decide_as_final(approver_id=HANNA.user_id, request_id=req.request_id, approve=True)
    assert leaves.get(req.request_id).status == LeaveStatus.PENDING_HR_CONFIRMATION


def test_unknown_request():
    svc, _, _ = _service()

    with pytest.raises(NotFoundError):
        svc.decide_as_final(approver_id=HANNA.user_id, request_id=42, approve=True)


def test_approved_comp_off_leave_consumes_an_earned_day():
    logs = [
        CompOffLog(log_id=1, user_id=ALICE.user_id, date_earned=date(2025, 9, 6), reason="Weekend release",
                   status=CompOffStatus.EARNED),
    ]
    svc, _, comp_off = _service(comp_off=FakeCompOff(logs))
    req = svc.submit(
        user_id=ALICE.user_id,
        data=_earned(start=date(2025, 10, 13), end=date(2025, 10, 13), leave_type=LeaveType.COMP_OFF),
    )

    svc.decide_as_final(approver_id=HANNA.user_id, request_id=req.request_id, approve=True)

    assert comp_off.logs[0].status == CompOffStatus.USED
    assert comp_off.logs[0].leave_request_id == req.request_id


def test_comp_off_approval_survives_missing_relation():
    svc, _, _ = _service(comp_off=FakeCompOff(missing=True))
    req = svc.submit(user_id=ALICE.user_id, data=_earned(leave_type=LeaveType.COMP_OFF))

    req = svc.decide_as_final(approver_id=HANNA.user_id, request_id=req.request_id, approve=True)

    assert req.status == LeaveStatus.APPROVED


def test_pending_list_is_scoped_to_current_approver():
    svc, _, _ = _service()
    bob_req = svc.submit(user_id=BOB.user_id, data=_earned())
    svc.submit(user_id=ALICE.user_id, data=_earned())

    assert [r.request_id for r in svc.list_pending_for(approver_id=CAROL.user_id)] == [bob_req.request_id]
    assert len(svc.list_pending_for(approver_id=HANNA.user_id)) == 1

    svc.decide_as_manager(approver_id=CAROL.user_id, request_id=bob_req.request_id, approve=False)
    assert svc.list_pending_for(approver_id=CAROL.user_id) == []


def test_every_final_role_holder_sees_requests_awaiting_confirmation():
    svc, _, _ = _service(users=FakeUsers([ALICE, BOB, CAROL, HANNA, IVAN]))
    req = svc.submit(user_id=ALICE.user_id, data=_earned())
    assert req.current_approver_id == HANNA.user_id

    assert [r.request_id for r in svc.list_pending_for(approver_id=IVAN.user_id)] == [req.request_id]
    assert [r.request_id for r in svc.list_pending_for(approver_id=HANNA.user_id)] == [req.request_id]
    assert svc.list_pending_for(approver_id=CAROL.user_id) == []

    svc.decide_as_final(approver_id=IVAN.user_id, request_id=req.request_id, approve=True)
    assert svc.list_pending_for(approver_id=IVAN.user_id) == []
    assert svc.list_pending_for(approver_id=HANNA.user_id) == []


def test_request_routed_while_nobody_held_the_final_role_is_listed_later():
    users = FakeUsers([ALICE, BOB, CAROL])
    svc, _, _ = _service(users=users)
    req = svc.submit(user_id=ALICE.user_id, data=_earned())
    assert req.status == LeaveStatus.PENDING_HR_CONFIRMATION
    assert req.current_approver_id is None

    users.add(HANNA)

    assert [r.request_id for r in svc.list_pending_for(approver_id=HANNA.user_id)] == [req.request_id]
    assert svc.decide_as_final(approver_id=HANNA.user_id, request_id=req.request_id, approve=False).status == (
        LeaveStatus.REJECTED
    )


def test_final_role_pending_list_does_not_repeat_assigned_requests():
    svc, _, _ = _service()
    first = svc.submit(user_id=ALICE.user_id, data=_earned())
    second = svc.submit(user_id=BOB.user_id, data=_earned())
    svc.decide_as_manager(approver_id=CAROL.user_id, request_id=second.request_id, approve=True)

    ids = [r.request_id for r in svc.list_pending_for(approver_id=HANNA.user_id)]

    assert sorted(ids) == [first.request_id, second.request_id]

def test_my_requests():
    svc, _, _ = _service()
    svc.submit(user_id=BOB.user_id, data=_earned())

    assert [r.user_id for r in svc.list_my_requests(user_id=BOB.user_id)] == [BOB.user_id]
    assert svc.list_my_requests(user_id=ALICE.user_id) == []


def test_balance_counts_only_approved_requests():
    svc, _, _ = _service()
    approved = svc.submit(user_id=ALICE.user_id, data=_earned())
    svc.decide_as_final(approver_id=HANNA.user_id, request_id=approved.request_id, approve=True)
    svc.submit(user_id=ALICE.user_id, data=_earned(start=date(2025, 11, 3), end=date(2025, 11, 7)))

    balance = svc.get_leave_balance(user_id=ALICE.user_id)

    earned = balance.entry(LeaveType.EARNED)
    assert (earned.total, earned.used, earned.remaining) == (18.0, 2.0, 16.0)
    assert balance.entry(LeaveType.FLOATING).total == 12.0
    assert balance.comp_off.available
    assert balance.entry(LeaveType.COMP_OFF).total == 0.0


def test_balance_without_comp_off_relation():
    svc, _, _ = _service(comp_off=FakeCompOff(missing=True))

    balance = svc.get_leave_balance(user_id=BOB.user_id)

    assert not balance.comp_off.available
    assert "comp_off_logs" in balance.comp_off.reason
    assert balance.entry(LeaveType.COMP_OFF) is None
    assert balance.entry(LeaveType.SICK).total == 10.0
