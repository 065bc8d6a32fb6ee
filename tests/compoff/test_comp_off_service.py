from datetime import date

import pytest

from attendance_reconciliation.compoff.service import CompOffService
from attendance_reconciliation.core.enums import CompOffStatus
from attendance_reconciliation.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    RelationNotFoundError,
    ValidationError,
)

from fakes import ALICE, BOB, CAROL, HANNA, FakeCompOff, FakeUsers


def _service(logs=None):
    logs = logs or FakeCompOff()
    return CompOffService(logs, FakeUsers([ALICE, BOB, CAROL, HANNA]), granting_role="hr"), logs


def test_hr_grants_comp_off():
    svc, logs = _service()

    log_id = svc.grant(granted_by_id=HANNA.user_id, user_id=BOB.user_id, date_earned=date(2025, 10, 11),
                       reason="Saturday site visit")

    availability, mine = svc.list_for_user(BOB.user_id)
    assert availability.available
    assert [log.log_id for log in mine] == [log_id]
    assert mine[0].status == CompOffStatus.EARNED
    assert mine[0].granted_by_name == "Hanna"


def test_only_granting_role_may_grant():
    svc, _ = _service()

    with pytest.raises(AuthorizationError):
        svc.grant(granted_by_id=CAROL.user_id, user_id=BOB.user_id, date_earned=date(2025, 10, 11),
                  reason="Saturday site visit")


def test_grant_validation():
    svc, _ = _service()

    with pytest.raises(NotFoundError):
        svc.grant(granted_by_id=HANNA.user_id, user_id=99, date_earned=date(2025, 10, 11), reason="x")
    with pytest.raises(ValidationError):
        svc.grant(granted_by_id=HANNA.user_id, user_id=BOB.user_id, date_earned=date(2025, 10, 11), reason="  ")


def test_missing_relation():
    svc, _ = _service(FakeCompOff(missing=True))

    availability, logs = svc.list_for_user(BOB.user_id)
    assert not availability.available
    assert logs == []

    with pytest.raises(RelationNotFoundError):
        svc.grant(granted_by_id=HANNA.user_id, user_id=BOB.user_id, date_earned=date(2025, 10, 11),
                  reason="Saturday site visit")
