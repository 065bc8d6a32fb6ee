from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..attendance.engine import StatusDerivationEngine
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_MAX_REPORT_DAYS
from . import aggregation
from .loader import ReportInputLoader
from .model import BasicReportRow, DashboardSummary, EventLogRow, MusterGrid


class ReportService:
    """Fetch-then-fold facade over the pure aggregation functions.

    ``user_ids=None`` means every active employee; ``today`` is always explicit so two
    runs with the same arguments over the same data give the same answer.
    """

    def __init__(
        self,
        loader: ReportInputLoader,
        *,
        engine: Optional[StatusDerivationEngine] = None,
        max_report_days: int = DEFAULT_MAX_REPORT_DAYS,
    ):
        self._loader = loader
        self._engine = engine or StatusDerivationEngine()
        self._max_days = int(max_report_days)

    def dashboard(
        self,
        *,
        start: date,
        end: date,
        today: date,
        user_ids: Optional[Sequence[int]] = None,
    ) -> DashboardSummary:
        require_date_range(start, end, max_days=self._max_days)
        inputs = self._loader.load(start=start, end=end, user_ids=user_ids, include_comp_off=True)
        return aggregation.compute_dashboard(inputs, start, end, today, engine=self._engine)

    def basic_report(
        self,
        *,
        start: date,
        end: date,
        today: date,
        user_ids: Optional[Sequence[int]] = None,
    ) -> list[BasicReportRow]:
        require_date_range(start, end, max_days=self._max_days)
        inputs = self._loader.load(start=start, end=end, user_ids=user_ids)
        return aggregation.compute_basic_report(inputs, start, end, today, engine=self._engine)

    def muster(
        self,
        *,
        start: date,
        end: date,
        today: date,
        user_ids: Optional[Sequence[int]] = None,
    ) -> MusterGrid:
        require_date_range(start, end, max_days=self._max_days)
        inputs = self._loader.load(start=start, end=end, user_ids=user_ids)
        return aggregation.compute_muster(inputs, start, end, today, engine=self._engine)

    def event_log(
        self,
        *,
        start: date,
        end: date,
        user_ids: Optional[Sequence[int]] = None,
    ) -> list[EventLogRow]:
        require_date_range(start, end, max_days=self._max_days)
        inputs = self._loader.load(start=start, end=end, user_ids=user_ids)
        return aggregation.collect_event_log(inputs, start, end)
