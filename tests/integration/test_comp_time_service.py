"""Comp time ledger against a real database."""

from datetime import date, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from factories import ORG_ID, USER_ID, utc
from seed import add_callout, add_comp_time
from time_ledger.calculators.errors import InvalidInputError
from time_ledger.calculators.types import CompTimeStatus, CompTimeType
from time_ledger.models import CompTimeEntry
from time_ledger.services.comp_time_service import CompTimeService
from time_ledger.services.ledger_store import LedgerStore

NOW = utc(2024, 6, 1, 12)


async def count_entries(session: AsyncSession) -> int:
    return await session.scalar(select(func.count()).select_from(CompTimeEntry))


class TestBalance:
    """Balances are read from stored entries."""

    async def test_balance_from_stored_entries(self, seeded_db: AsyncSession):
        await add_comp_time(seeded_db, 120, NOW + timedelta(days=60), date(2024, 5, 1))
        await add_comp_time(
            seeded_db, 90, NOW + timedelta(days=5), date(2024, 3, 10),
            minutes_used=30, status=CompTimeStatus.PARTIALLY_USED,
        )
        await add_comp_time(
            seeded_db, 60, NOW + timedelta(days=10), date(2024, 3, 12),
            minutes_used=60, status=CompTimeStatus.USED,
        )
        await add_comp_time(seeded_db, 45, NOW - timedelta(days=1), date(2024, 2, 1))

        entries, balance = await CompTimeService(seeded_db).get_balance(USER_ID, ORG_ID, NOW)

        assert len(entries) == 4
        assert entries[0].source_date == date(2024, 5, 1)
        assert balance.total_minutes == 180
        assert balance.expiring_minutes == 60

    async def test_other_users_not_counted(self, seeded_db: AsyncSession):
        await add_comp_time(seeded_db, 120, NOW + timedelta(days=60), date(2024, 5, 1), user_id=uuid4())

        entries, balance = await CompTimeService(seeded_db).get_balance(USER_ID, ORG_ID, NOW)

        assert entries == []
        assert balance.total_minutes == 0


class TestGrant:
    """Manual grants."""

    async def test_grant_is_stored(self, seeded_db: AsyncSession):
        service = CompTimeService(seeded_db)

        granted = await service.grant(USER_ID, ORG_ID, 240, description="Release night", now=NOW)

        assert granted.entry_id is not None
        assert granted.entry_type == CompTimeType.MANUAL
        assert granted.expires_at == utc(2024, 8, 30, 12)

        _, balance = await service.get_balance(USER_ID, ORG_ID, NOW)
        assert balance.total_minutes == 240

    async def test_invalid_grant_stores_nothing(self, seeded_db: AsyncSession):
        with pytest.raises(InvalidInputError):
            await CompTimeService(seeded_db).grant(USER_ID, ORG_ID, 0, now=NOW)

        assert await count_entries(seeded_db) == 0


class TestCalloutAccrual:
    """Callouts earn comp time once."""

    async def test_accrue_callout(self, seeded_db: AsyncSession):
        callout_id = await add_callout(
            seeded_db, utc(2024, 5, 30, 22), utc(2024, 5, 30, 22, 5), utc(2024, 5, 30, 23, 35)
        )
        callout = await LedgerStore(seeded_db).get_callout(callout_id)

        earned = await CompTimeService(seeded_db).accrue_callout(callout, ORG_ID, "UTC")

        assert earned.minutes_earned == 90
        assert earned.callout_id == callout_id
        assert earned.source_date == date(2024, 5, 30)

    async def test_accrual_is_idempotent(self, seeded_db: AsyncSession):
        callout_id = await add_callout(
            seeded_db, utc(2024, 5, 30, 22), utc(2024, 5, 30, 22), utc(2024, 5, 30, 23)
        )
        callout = await LedgerStore(seeded_db).get_callout(callout_id)
        service = CompTimeService(seeded_db)

        first = await service.accrue_callout(callout, ORG_ID, "UTC")
        second = await service.accrue_callout(callout, ORG_ID, "UTC")

        assert first.entry_id == second.entry_id
        assert await count_entries(seeded_db) == 1

    async def test_unfinished_callout_accrues_nothing(self, seeded_db: AsyncSession):
        callout_id = await add_callout(seeded_db, utc(2024, 5, 30, 22), utc(2024, 5, 30, 22), None)
        callout = await LedgerStore(seeded_db).get_callout(callout_id)

        assert await CompTimeService(seeded_db).accrue_callout(callout, ORG_ID, "UTC") is None
        assert await count_entries(seeded_db) == 0
