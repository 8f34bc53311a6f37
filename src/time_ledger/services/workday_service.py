"""Work day recomputation service."""

from __future__ import annotations

import logging
from datetime import date, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from time_ledger.calculators.dates import day_bounds, local_date
from time_ledger.calculators.day_aggregator import aggregate_day, evaluate_break_compliance
from time_ledger.calculators.policy_resolver import break_rules_for
from time_ledger.calculators.types import BreakViolation, DaySummary
from time_ledger.services.ledger_store import LedgerStore
from time_ledger.services.locking_service import RecomputeLocks, recompute_locks
from time_ledger.services.policy_service import PolicyService

logger = logging.getLogger(__name__)


class WorkDayService:
    """Service for keeping WorkDay rows in step with the event ledger.

    Each recompute replaces the stored summary with one derived from the
    full event set of the day; nothing is applied incrementally, so
    repeating a recompute is always safe.
    """

    def __init__(
        self,
        session: AsyncSession,
        store: LedgerStore | None = None,
        locks: RecomputeLocks | None = None,
    ):
        self.session = session
        self.store = store or LedgerStore(session)
        self.policy_service = PolicyService(session, self.store)
        self.locks = locks or recompute_locks

    async def recompute_day(
        self,
        user_id: UUID,
        org_id: UUID,
        day: date,
        tz_name: str,
        jurisdiction: str | None = None,
        now: datetime | None = None,
        commit: bool = True,
    ) -> DaySummary | None:
        """Recompute and store the summary for a user's local day.

        Runs under the (user, date) lock; with commit=True the write is
        committed before the lock is released so the next recompute sees it.

        Returns:
            The stored summary, or None when the day has no events (any
            stale summary is removed)
        """
        async with self.locks.hold(self.session, user_id, day):
            start, end = day_bounds(day, tz_name)
            events = await self.store.list_events(user_id, start, end)

            if not events:
                removed = await self.store.delete_day_summary(user_id, day)
                if removed:
                    logger.info("Removed work day for user %s on %s: no events remain", user_id, day)
                if commit:
                    await self.session.commit()
                return None

            policy = await self.policy_service.resolve_effective_policy(org_id, jurisdiction, day)
            remote = await self.store.remote_location_ids(e.location_id for e in events)
            summary = aggregate_day(
                events,
                day,
                tz_name,
                policy,
                remote_location_ids=remote,
                now=now,
                user_id=user_id,
            )
            await self.store.save_day_summary(summary)
            if commit:
                await self.session.commit()

        logger.info(
            "Recomputed work day for user %s on %s: %d min worked, %d min break, meets_policy=%s",
            user_id,
            day,
            summary.total_minutes,
            summary.break_minutes,
            summary.meets_policy,
        )
        return summary

    async def recompute_for_event(
        self,
        user_id: UUID,
        org_id: UUID,
        event_time: datetime,
        tz_name: str,
        jurisdiction: str | None = None,
    ) -> DaySummary | None:
        """Recompute the day an event landed on, in the user's timezone."""
        return await self.recompute_day(
            user_id, org_id, local_date(event_time, tz_name), tz_name, jurisdiction
        )

    async def break_violations(
        self,
        summary: DaySummary,
        org_id: UUID,
        jurisdiction: str | None = None,
    ) -> list[BreakViolation]:
        """Evaluate a summary against the break rules of the effective policy."""
        policy = await self.policy_service.resolve_effective_policy(org_id, jurisdiction, summary.date)
        return evaluate_break_compliance(summary, break_rules_for(policy))
