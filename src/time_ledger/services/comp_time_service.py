"""Compensatory time service."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from time_ledger.calculators.comp_time import (
    EXPIRING_SOON_DAYS,
    calculate_comp_time_balance,
    callout_comp_time,
    manual_grant,
)
from time_ledger.calculators.types import Callout, CompTimeBalance, CompTimeEntry
from time_ledger.config import get_settings
from time_ledger.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class CompTimeService:
    """Records comp time earned from callouts and grants, and reports balances.

    Balances are computed from the stored entries on every call; expiry is
    evaluated against the requested instant, not a stored flag.
    """

    def __init__(self, session: AsyncSession, store: LedgerStore | None = None):
        self.session = session
        self.store = store or LedgerStore(session)
        self.settings = get_settings()

    async def get_balance(
        self,
        user_id: UUID,
        org_id: UUID,
        as_of: datetime | None = None,
        expiring_within_days: int = EXPIRING_SOON_DAYS,
    ) -> tuple[list[CompTimeEntry], CompTimeBalance]:
        """Get a user's entries and their balance as of an instant (default now)."""
        as_of = as_of or datetime.now(timezone.utc)
        entries = await self.store.list_comp_time(user_id, org_id)
        return entries, calculate_comp_time_balance(entries, as_of, expiring_within_days)

    async def grant(
        self,
        user_id: UUID,
        org_id: UUID,
        minutes: int,
        source_date: date | None = None,
        description: str | None = None,
        now: datetime | None = None,
    ) -> CompTimeEntry:
        """Manually grant comp time; it expires 90 days from now."""
        entry = manual_grant(
            user_id,
            org_id,
            minutes,
            now or datetime.now(timezone.utc),
            source_date=source_date,
            description=description,
        )
        stored = await self.store.add_comp_time(entry)
        await self.session.commit()
        logger.info("Granted %d comp minutes to user %s", minutes, user_id)
        return stored

    async def accrue_callout(
        self,
        callout: Callout,
        org_id: UUID,
        tz_name: str | None = None,
    ) -> CompTimeEntry | None:
        """Record the comp time a callout earned.

        Repeating the call returns the entry already recorded. Returns None
        while the callout has no worked minutes.
        """
        existing = await self.store.get_comp_time_for_callout(callout.callout_id)
        if existing is not None:
            return existing

        entry = callout_comp_time(callout, org_id, tz_name or self.settings.default_timezone)
        if entry is None:
            return None

        stored = await self.store.add_comp_time(entry)
        await self.session.commit()
        logger.info(
            "Accrued %d comp minutes for user %s from callout %s",
            entry.minutes_earned,
            callout.user_id,
            callout.callout_id,
        )
        return stored
