"""Pytest fixtures for time ledger tests."""

from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

import pytest

from factories import ORG_ID, USER_ID, make_event, utc
from time_ledger.calculators.types import EventType, Policy, RawEvent


@pytest.fixture
def org_id() -> UUID:
    return ORG_ID


@pytest.fixture
def user_id() -> UUID:
    return USER_ID


@pytest.fixture
def default_policy(org_id) -> Policy:
    """Org default policy: 8h minimum day, 10 PTO days, 5 carried over."""
    return Policy(
        org_id=org_id,
        policy_id=uuid4(),
        minimum_minutes_per_day=480,
        annual_pto_days=10,
        max_carryover_days=5,
        effective_date=date(2024, 1, 1),
    )


@pytest.fixture
def working_day_events(user_id) -> list[RawEvent]:
    """09:00-17:30 UTC with a 30 minute lunch on 2024-03-12."""
    return [
        make_event(EventType.CLOCK_IN, utc(2024, 3, 12, 9, 0), user_id),
        make_event(EventType.BREAK_START, utc(2024, 3, 12, 12, 0), user_id),
        make_event(EventType.BREAK_END, utc(2024, 3, 12, 12, 30), user_id),
        make_event(EventType.CLOCK_OUT, utc(2024, 3, 12, 17, 30), user_id),
    ]
