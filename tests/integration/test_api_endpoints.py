"""API endpoint integration tests.

Tests the FastAPI endpoints for work days, overtime, leave, timesheets
and policies.
"""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from factories import USER_ID, utc
from seed import add_callout, add_comp_time, add_events, add_leave
from time_ledger.calculators.types import EventType

pytestmark = pytest.mark.asyncio

STANDARD_DAY = [
    (EventType.CLOCK_IN, utc(2024, 3, 12, 9)),
    (EventType.BREAK_START, utc(2024, 3, 12, 12)),
    (EventType.BREAK_END, utc(2024, 3, 12, 12, 30)),
    (EventType.CLOCK_OUT, utc(2024, 3, 12, 17, 30)),
]


def week(minutes: list[int], monday: str = "2024-03-11") -> list[dict]:
    start = date.fromisoformat(monday)
    return [
        {"date": date.fromordinal(start.toordinal() + i).isoformat(), "total_minutes": m}
        for i, m in enumerate(minutes)
    ]


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should return 200."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert "timestamp" in data

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestOrgHeader:
    """X-Org-ID is required on API routes."""

    async def test_missing_org_header(self, client: AsyncClient):
        response = await client.get("/api/v1/policies/effective")

        assert response.status_code == 400
        assert "X-Org-ID" in response.json()["detail"]

    async def test_malformed_org_header(self, client: AsyncClient):
        response = await client.get("/api/v1/policies/effective", headers={"X-Org-ID": "not-a-uuid"})

        assert response.status_code == 400


class TestWorkDayEndpoints:
    """Recompute and read work days."""

    async def test_recompute(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        await add_events(seeded_db, STANDARD_DAY)

        response = await client.post(
            f"/api/v1/workdays/{USER_ID}/2024-03-12/recompute",
            params={"timezone": "UTC"},
            headers=org_headers,
        )

        assert response.status_code == 200, response.text
        summary = response.json()["summary"]
        assert summary["total_minutes"] == 480
        assert summary["break_minutes"] == 30
        assert summary["meets_policy"] is True
        assert summary["break_violations"] == []

    async def test_recompute_reports_break_violations(
        self, client: AsyncClient, seeded_db: AsyncSession, org_headers
    ):
        await add_events(seeded_db, STANDARD_DAY)

        response = await client.post(
            f"/api/v1/workdays/{USER_ID}/2024-03-12/recompute",
            params={"timezone": "UTC", "jurisdiction": "US-CA"},
            headers=org_headers,
        )

        assert response.status_code == 200, response.text
        kinds = [v["kind"] for v in response.json()["summary"]["break_violations"]]
        assert kinds == ["rest"]

    async def test_recompute_without_events(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.post(
            f"/api/v1/workdays/{USER_ID}/2024-03-12/recompute",
            headers=org_headers,
        )

        assert response.status_code == 200
        assert response.json()["summary"] is None

    async def test_recompute_unknown_timezone(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.post(
            f"/api/v1/workdays/{USER_ID}/2024-03-12/recompute",
            params={"timezone": "Nowhere/Special"},
            headers=org_headers,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_INPUT"

    async def test_get_work_day(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        await add_events(seeded_db, STANDARD_DAY)
        await client.post(
            f"/api/v1/workdays/{USER_ID}/2024-03-12/recompute",
            params={"timezone": "UTC"},
            headers=org_headers,
        )

        response = await client.get(f"/api/v1/workdays/{USER_ID}/2024-03-12", headers=org_headers)

        assert response.status_code == 200
        assert response.json()["total_minutes"] == 480

    async def test_get_missing_work_day(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.get(f"/api/v1/workdays/{USER_ID}/2024-03-12", headers=org_headers)

        assert response.status_code == 404


class TestOvertimePreview:
    """Overtime split under the effective policy."""

    async def test_weekly_overtime(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.post(
            "/api/v1/overtime/preview",
            json={"days": week([480, 480, 480, 480, 600, 0, 0])},
            headers=org_headers,
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["regular_minutes"] == 2400
        assert data["overtime_minutes"] == 120
        assert data["total_minutes"] == 2520
        assert data["policy"]["weekly_threshold_minutes"] == 2400

    async def test_california_daily_split(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.post(
            "/api/v1/overtime/preview",
            json={"days": week([800, 0, 0, 0, 0, 0, 0]), "jurisdiction": "US-CA"},
            headers=org_headers,
        )

        assert response.status_code == 200, response.text
        monday = response.json()["daily_breakdown"][0]
        assert monday["regular_minutes"] == 480
        assert monday["overtime_minutes"] == 240
        assert monday["double_time_minutes"] == 80

    async def test_short_week_rejected(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.post(
            "/api/v1/overtime/preview",
            json={"days": week([480] * 6)},
            headers=org_headers,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_INPUT"

    async def test_negative_minutes_rejected(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.post(
            "/api/v1/overtime/preview",
            json={"days": week([480, -5, 0, 0, 0, 0, 0])},
            headers=org_headers,
        )

        assert response.status_code == 422


class TestLeaveBalance:
    """PTO balance endpoint."""

    async def test_balance(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        await add_leave(seeded_db, [date(2023, 5, 1), date(2023, 5, 2), date(2024, 2, 12)])

        response = await client.get(
            f"/api/v1/leave/{USER_ID}/balance",
            params={"reference_date": "2024-06-01"},
            headers=org_headers,
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["annual_allowance"] == 10
        assert data["carryover"] == 5
        assert data["taken"] == 1
        assert data["remaining"] == 14
        assert data["leave_year_start"] == "2024-01-01"


class TestCompTime:
    """Comp time balance, grants and callout accrual."""

    async def test_balance(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        as_of = utc(2024, 6, 1, 12)
        await add_comp_time(seeded_db, 150, as_of + timedelta(days=60), date(2024, 5, 1))
        await add_comp_time(seeded_db, 45, as_of + timedelta(days=3), date(2024, 3, 1))
        await add_comp_time(seeded_db, 30, as_of - timedelta(days=1), date(2024, 2, 1))

        response = await client.get(
            f"/api/v1/comp-time/{USER_ID}",
            params={"as_of": as_of.isoformat()},
            headers=org_headers,
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["balance"]["total_minutes"] == 195
        assert data["balance"]["available_hours"] == 3
        assert data["balance"]["available_remaining_minutes"] == 15
        assert data["balance"]["expiring_minutes"] == 45
        assert data["balance"]["expiring_within_days"] == 14
        assert [e["status"] for e in data["entries"]] == ["AVAILABLE", "AVAILABLE", "EXPIRED"]

    async def test_grant(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.post(
            f"/api/v1/comp-time/{USER_ID}",
            json={"minutes_earned": 120, "description": "Release night"},
            headers=org_headers,
        )

        assert response.status_code == 201, response.text
        data = response.json()
        assert data["entry_type"] == "MANUAL"
        assert data["remaining_minutes"] == 120
        expires_at = datetime.fromisoformat(data["expires_at"])
        assert expires_at - datetime.now(timezone.utc) > timedelta(days=89)

        balance = await client.get(f"/api/v1/comp-time/{USER_ID}", headers=org_headers)
        assert balance.json()["balance"]["total_minutes"] == 120

    async def test_grant_requires_positive_minutes(
        self, client: AsyncClient, seeded_db: AsyncSession, org_headers
    ):
        response = await client.post(
            f"/api/v1/comp-time/{USER_ID}",
            json={"minutes_earned": 0},
            headers=org_headers,
        )

        assert response.status_code == 422

    async def test_accrue_callout(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        callout_id = await add_callout(
            seeded_db, utc(2024, 5, 30, 22), utc(2024, 5, 30, 22), utc(2024, 5, 30, 23, 15)
        )

        first = await client.post(
            f"/api/v1/comp-time/callouts/{callout_id}/accrue",
            params={"timezone": "UTC"},
            headers=org_headers,
        )
        second = await client.post(
            f"/api/v1/comp-time/callouts/{callout_id}/accrue",
            params={"timezone": "UTC"},
            headers=org_headers,
        )

        assert first.status_code == 200, first.text
        assert first.json()["minutes_earned"] == 75
        assert first.json()["entry_type"] == "CALLOUT"
        assert second.json()["entry_id"] == first.json()["entry_id"]

    async def test_accrue_unfinished_callout(
        self, client: AsyncClient, seeded_db: AsyncSession, org_headers
    ):
        callout_id = await add_callout(seeded_db, utc(2024, 5, 30, 22), None, None)

        response = await client.post(
            f"/api/v1/comp-time/callouts/{callout_id}/accrue", headers=org_headers
        )

        assert response.status_code == 204

    async def test_accrue_unknown_callout(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.post(
            f"/api/v1/comp-time/callouts/{uuid4()}/accrue", headers=org_headers
        )

        assert response.status_code == 404


class TestTimesheets:
    """Timesheet endpoint."""

    async def test_month_timesheet(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        await add_events(seeded_db, STANDARD_DAY)
        await client.post(
            f"/api/v1/workdays/{USER_ID}/2024-03-12/recompute",
            params={"timezone": "UTC"},
            headers=org_headers,
        )

        response = await client.get(
            f"/api/v1/timesheets/{USER_ID}",
            params={"period": "2024-03", "timezone": "UTC"},
            headers=org_headers,
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert len(data["weeks"]) == 5
        assert data["totals"]["regular_minutes"] == 480
        assert data["totals"]["onsite_minutes"] == 480

    async def test_bad_period(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.get(
            f"/api/v1/timesheets/{USER_ID}",
            params={"period": "2024-13"},
            headers=org_headers,
        )

        assert response.status_code == 422


class TestPolicies:
    """Policy and jurisdiction endpoints."""

    async def test_effective_org_default(self, client: AsyncClient, seeded_db: AsyncSession, org_headers):
        response = await client.get("/api/v1/policies/effective", headers=org_headers)

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["is_system_default"] is False
        assert data["jurisdiction"] is None
        assert data["annual_pto_days"] == 10

    async def test_effective_jurisdiction_policy(
        self, client: AsyncClient, seeded_db: AsyncSession, org_headers
    ):
        response = await client.get(
            "/api/v1/policies/effective",
            params={"jurisdiction": "US-CA"},
            headers=org_headers,
        )

        data = response.json()
        assert data["jurisdiction"] == "US-CA"
        assert data["overtime_policy"]["daily_threshold_minutes"] == 480
        assert data["overtime_policy"]["seventh_day_rule"] is True

    async def test_system_default(self, client: AsyncClient, org_headers):
        response = await client.get("/api/v1/policies/effective", headers=org_headers)

        assert response.status_code == 200, response.text
        assert response.json()["is_system_default"] is True

    async def test_jurisdictions(self, client: AsyncClient):
        response = await client.get("/api/v1/jurisdictions")

        assert response.status_code == 200
        data = response.json()
        assert data["version"]
        codes = [j["code"] for j in data["items"]]
        assert "US-CA" in codes
        assert "US-FLSA" in codes
