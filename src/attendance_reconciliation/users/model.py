from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import OFFICE_ROLES
from ..core.enums import StaffType


def staff_type_for_role(role: str) -> StaffType:
    """admin/hr/finance work to the office calendar; every other role is field staff."""
    return StaffType.OFFICE if (role or "").strip().lower() in OFFICE_ROLES else StaffType.FIELD


@dataclass(frozen=True)
class User:
    """Domain entity: an employee as seen by the attendance engine.

    Plain data object; no DB access here.
    """

    user_id: int
    name: str
    role: str
    reporting_manager_id: Optional[int] = None
    is_active: bool = True

    @property
    def staff_type(self) -> StaffType:
        return staff_type_for_role(self.role)
