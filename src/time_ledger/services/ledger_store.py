"""Read and upsert access to the event, policy, leave, comp time and work day stores."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from time_ledger.calculators.dates import to_utc
from time_ledger.calculators.types import (
    Callout,
    CompTimeEntry,
    DaySummary,
    LeaveAllowanceOverride,
    LeaveRequest,
    LeaveStatus,
    LeaveType,
    LocationCategory,
    Policy,
    RawEvent,
)
from time_ledger.models import (
    Callout as CalloutModel,
    ClockEvent,
    CompTimeEntry as CompTimeEntryModel,
    LeaveAllowanceOverride as LeaveAllowanceOverrideModel,
    LeaveRequest as LeaveRequestModel,
    Location,
    PolicyConfig,
    WorkDay,
)


class LedgerStore:
    """Store access used by the time ledger services.

    Every read returns calculator types, so the pure calculators never
    touch ORM objects.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_events(
        self,
        user_id: UUID,
        from_inclusive: datetime,
        to_exclusive: datetime,
    ) -> list[RawEvent]:
        """Get a user's events in [from, to), ordered by server timestamp."""
        result = await self.session.execute(
            select(ClockEvent)
            .where(
                ClockEvent.user_id == user_id,
                ClockEvent.timestamp_server >= to_utc(from_inclusive),
                ClockEvent.timestamp_server < to_utc(to_exclusive),
            )
            .order_by(ClockEvent.timestamp_server, ClockEvent.event_id)
        )
        return [row.to_domain() for row in result.scalars().all()]

    async def list_active_policies(self, org_id: UUID) -> list[Policy]:
        """Get every active policy version for an org."""
        result = await self.session.execute(
            select(PolicyConfig).where(
                PolicyConfig.org_id == org_id,
                PolicyConfig.is_active.is_(True),
            )
        )
        return [row.to_domain() for row in result.scalars().all()]

    async def list_overrides(self, user_id: UUID, org_id: UUID) -> list[LeaveAllowanceOverride]:
        """Get all allowance overrides for a user in an org."""
        result = await self.session.execute(
            select(LeaveAllowanceOverrideModel).where(
                LeaveAllowanceOverrideModel.user_id == user_id,
                LeaveAllowanceOverrideModel.org_id == org_id,
            )
        )
        return [row.to_domain() for row in result.scalars().all()]

    async def count_approved_leave(
        self,
        user_id: UUID,
        leave_type: LeaveType,
        from_inclusive: date,
        to_inclusive: date,
    ) -> int:
        """Count approved leave days of a type in an inclusive date range."""
        count = await self.session.scalar(
            select(func.count())
            .select_from(LeaveRequestModel)
            .where(
                LeaveRequestModel.user_id == user_id,
                LeaveRequestModel.leave_type == LeaveType(leave_type).value,
                LeaveRequestModel.status == LeaveStatus.APPROVED.value,
                LeaveRequestModel.leave_date >= from_inclusive,
                LeaveRequestModel.leave_date <= to_inclusive,
            )
        )
        return int(count or 0)

    async def list_leave_requests(
        self,
        user_id: UUID,
        from_inclusive: date,
        to_inclusive: date,
        status: LeaveStatus | None = LeaveStatus.APPROVED,
    ) -> list[LeaveRequest]:
        """Get a user's leave requests in an inclusive date range."""
        query = select(LeaveRequestModel).where(
            LeaveRequestModel.user_id == user_id,
            LeaveRequestModel.leave_date >= from_inclusive,
            LeaveRequestModel.leave_date <= to_inclusive,
        )
        if status is not None:
            query = query.where(LeaveRequestModel.status == status.value)
        result = await self.session.execute(query.order_by(LeaveRequestModel.leave_date))
        return [row.to_domain() for row in result.scalars().all()]

    async def get_day_summary(self, user_id: UUID, day: date) -> DaySummary | None:
        """Get the stored summary for a user and date."""
        row = await self._get_work_day(user_id, day)
        return row.to_domain() if row else None

    async def list_day_summaries(
        self,
        user_id: UUID,
        from_inclusive: date,
        to_inclusive: date,
    ) -> list[DaySummary]:
        """Get stored summaries in an inclusive date range."""
        result = await self.session.execute(
            select(WorkDay)
            .where(
                WorkDay.user_id == user_id,
                WorkDay.work_date >= from_inclusive,
                WorkDay.work_date <= to_inclusive,
            )
            .order_by(WorkDay.work_date)
        )
        return [row.to_domain() for row in result.scalars().all()]

    async def save_day_summary(self, summary: DaySummary) -> None:
        """Idempotently overwrite the summary keyed on (user, date)."""
        if summary.user_id is None:
            raise ValueError("Cannot save a day summary without a user_id")

        row = await self._get_work_day(summary.user_id, summary.date)
        if row is None:
            row = WorkDay(user_id=summary.user_id, work_date=summary.date)
            self.session.add(row)

        row.total_minutes = summary.total_minutes
        row.break_minutes = summary.break_minutes
        row.first_clock_in = summary.first_clock_in
        row.last_clock_out = summary.last_clock_out
        row.meets_policy = summary.meets_policy
        row.location_id = summary.location_id
        row.event_count = summary.event_count
        row.updated_at = datetime.now(timezone.utc)
        await self.session.flush()

    async def delete_day_summary(self, user_id: UUID, day: date) -> int:
        """Remove the stored summary for a user and date. Returns rows removed."""
        result = await self.session.execute(
            delete(WorkDay).where(WorkDay.user_id == user_id, WorkDay.work_date == day)
        )
        return result.rowcount or 0

    async def list_callouts(
        self,
        user_id: UUID,
        from_inclusive: datetime,
        to_exclusive: datetime,
    ) -> list[Callout]:
        """Get a user's callouts received in [from, to)."""
        result = await self.session.execute(
            select(CalloutModel)
            .where(
                CalloutModel.user_id == user_id,
                CalloutModel.time_received >= to_utc(from_inclusive),
                CalloutModel.time_received < to_utc(to_exclusive),
            )
            .order_by(CalloutModel.time_received)
        )
        return [row.to_domain() for row in result.scalars().all()]

    async def get_callout(self, callout_id: UUID) -> Callout | None:
        """Get a callout by id."""
        row = await self.session.get(CalloutModel, callout_id)
        return row.to_domain() if row else None

    async def list_comp_time(self, user_id: UUID, org_id: UUID) -> list[CompTimeEntry]:
        """Get a user's comp time entries, newest source date first."""
        result = await self.session.execute(
            select(CompTimeEntryModel)
            .where(
                CompTimeEntryModel.user_id == user_id,
                CompTimeEntryModel.org_id == org_id,
            )
            .order_by(CompTimeEntryModel.source_date.desc(), CompTimeEntryModel.entry_id)
        )
        return [row.to_domain() for row in result.scalars().all()]

    async def get_comp_time_for_callout(self, callout_id: UUID) -> CompTimeEntry | None:
        """Get the entry earned by a callout, if one was recorded."""
        result = await self.session.execute(
            select(CompTimeEntryModel).where(CompTimeEntryModel.callout_id == callout_id)
        )
        row = result.scalar_one_or_none()
        return row.to_domain() if row else None

    async def add_comp_time(self, entry: CompTimeEntry) -> CompTimeEntry:
        """Insert a comp time entry and return it with its id."""
        row = CompTimeEntryModel.from_domain(entry)
        self.session.add(row)
        await self.session.flush()
        return row.to_domain()

    async def location_categories(self, location_ids: Iterable[UUID | None]) -> dict[UUID, LocationCategory]:
        """Map location ids to their categories."""
        ids = {i for i in location_ids if i is not None}
        if not ids:
            return {}
        result = await self.session.execute(
            select(Location.location_id, Location.category).where(Location.location_id.in_(ids))
        )
        return {row.location_id: LocationCategory(row.category) for row in result.all()}

    async def remote_location_ids(self, location_ids: Iterable[UUID | None]) -> set[UUID]:
        """Return the subset of location ids in the HOME category."""
        categories = await self.location_categories(location_ids)
        return {i for i, category in categories.items() if category == LocationCategory.HOME}

    async def _get_work_day(self, user_id: UUID, day: date) -> WorkDay | None:
        result = await self.session.execute(
            select(WorkDay).where(WorkDay.user_id == user_id, WorkDay.work_date == day)
        )
        return result.scalar_one_or_none()
