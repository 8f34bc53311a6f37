"""Payroll timesheet service."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from time_ledger.calculators.dates import parse_period, range_bounds
from time_ledger.calculators.overtime import payroll_overtime_policy
from time_ledger.calculators.timesheet import build_timesheet
from time_ledger.calculators.types import OvertimePolicy, Timesheet
from time_ledger.config import get_settings
from time_ledger.services.ledger_store import LedgerStore


class TimesheetService:
    """Builds payroll timesheets from stored work days, callouts and leave.

    Payroll uses its own flat weekly threshold and never consults the
    org's compliance policy.
    """

    def __init__(self, session: AsyncSession, store: LedgerStore | None = None):
        self.session = session
        self.store = store or LedgerStore(session)
        self.settings = get_settings()

    @property
    def payroll_policy(self) -> OvertimePolicy:
        return payroll_overtime_policy(self.settings.payroll_weekly_threshold_minutes)

    async def generate_timesheet(
        self,
        user_id: UUID,
        period: str | tuple[date, date],
        tz_name: str | None = None,
    ) -> Timesheet:
        """Generate a timesheet for a month ('YYYY-MM'), ISO week ('YYYY-Www')
        or an explicit inclusive (start, end) range."""
        tz_name = tz_name or self.settings.default_timezone
        if isinstance(period, str):
            start, end = parse_period(period)
        else:
            start, end = period

        from_instant, to_instant = range_bounds(start, end, tz_name)
        summaries = await self.store.list_day_summaries(user_id, start, end)
        callouts = await self.store.list_callouts(user_id, from_instant, to_instant)
        leave = await self.store.list_leave_requests(user_id, start, end)
        categories = await self.store.location_categories(s.location_id for s in summaries)

        return build_timesheet(
            user_id,
            start,
            end,
            summaries,
            tz_name=tz_name,
            callouts=callouts,
            leave_requests=leave,
            location_categories=categories,
            policy=self.payroll_policy,
        )
