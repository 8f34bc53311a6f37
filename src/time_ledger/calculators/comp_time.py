"""Compensatory time earned from incident callouts and manual grants.

Entries expire 90 days after they are earned. A balance counts the
unused minutes of AVAILABLE and PARTIALLY_USED entries that have not
expired yet, and separately reports how much of it expires within the
warning window (14 days by default).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from uuid import UUID

from time_ledger.calculators.dates import local_date, to_utc
from time_ledger.calculators.errors import InvalidInputError
from time_ledger.calculators.types import (
    Callout,
    CompTimeBalance,
    CompTimeEntry,
    CompTimeStatus,
    CompTimeType,
)

logger = logging.getLogger(__name__)

COMP_TIME_EXPIRY_DAYS = 90
EXPIRING_SOON_DAYS = 14

OPEN_STATUSES = frozenset({CompTimeStatus.AVAILABLE, CompTimeStatus.PARTIALLY_USED})


def comp_time_expiry(earned_at: datetime) -> datetime:
    """Instant at which comp time earned at earned_at lapses."""
    return to_utc(earned_at) + timedelta(days=COMP_TIME_EXPIRY_DAYS)


def effective_status(entry: CompTimeEntry, as_of: datetime) -> CompTimeStatus:
    """Stored status, except that open entries past expires_at are EXPIRED."""
    if entry.status in OPEN_STATUSES and to_utc(entry.expires_at) <= to_utc(as_of):
        return CompTimeStatus.EXPIRED
    return entry.status


def manual_grant(
    user_id: UUID,
    org_id: UUID,
    minutes: int,
    granted_at: datetime,
    source_date: date | None = None,
    description: str | None = None,
) -> CompTimeEntry:
    """Build a manually granted entry. source_date defaults to the grant's UTC date."""
    if minutes <= 0:
        raise InvalidInputError("minutes_earned", minutes, "must be greater than 0")
    granted_at = to_utc(granted_at)
    return CompTimeEntry(
        user_id=user_id,
        org_id=org_id,
        source_date=source_date or granted_at.date(),
        minutes_earned=minutes,
        expires_at=comp_time_expiry(granted_at),
        entry_type=CompTimeType.MANUAL,
        description=description or "Manual grant by admin",
    )


def callout_comp_time(callout: Callout, org_id: UUID, tz_name: str) -> CompTimeEntry | None:
    """Comp time earned by working a callout, or None when nothing was worked.

    The entry is dated on the local day the callout was received and
    expires 90 days after the work ended.
    """
    minutes = callout.worked_minutes
    if minutes <= 0 or callout.time_ended is None:
        return None
    return CompTimeEntry(
        user_id=callout.user_id,
        org_id=org_id,
        source_date=local_date(callout.time_received, tz_name),
        minutes_earned=minutes,
        expires_at=comp_time_expiry(callout.time_ended),
        entry_type=CompTimeType.CALLOUT,
        callout_id=callout.callout_id,
        description=f"{callout.priority.title()} priority callout",
    )


def calculate_comp_time_balance(
    entries: Iterable[CompTimeEntry],
    as_of: datetime,
    expiring_within_days: int = EXPIRING_SOON_DAYS,
) -> CompTimeBalance:
    """Sum unused minutes of open, unexpired entries as of an instant."""
    if expiring_within_days < 0:
        raise InvalidInputError("expiring_within_days", expiring_within_days, "must not be negative")

    as_of = to_utc(as_of)
    horizon = as_of + timedelta(days=expiring_within_days)
    total = 0
    expiring = 0
    for entry in entries:
        if entry.minutes_used > entry.minutes_earned:
            logger.warning(
                "Comp time entry %s used %d of %d minutes",
                entry.entry_id,
                entry.minutes_used,
                entry.minutes_earned,
            )
        if effective_status(entry, as_of) not in OPEN_STATUSES:
            continue
        remaining = entry.remaining_minutes
        total += remaining
        if to_utc(entry.expires_at) <= horizon:
            expiring += remaining

    return CompTimeBalance(
        total_minutes=total,
        expiring_minutes=expiring,
        expiring_within_days=expiring_within_days,
        as_of=as_of,
    )
