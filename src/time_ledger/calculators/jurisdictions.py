"""Known jurisdiction rule bundles.

Static, versioned data. Bump JURISDICTION_TABLE_VERSION whenever a bundle
changes so persisted results can be traced to the rules that produced them.
"""

from __future__ import annotations

from dataclasses import dataclass

JURISDICTION_TABLE_VERSION = "2025.1"

DEFAULT_JURISDICTION = "US-FLSA"


@dataclass(frozen=True)
class JurisdictionRules:
    """Labor-law feature bundle for a jurisdiction code."""

    code: str
    label: str
    overtime_daily_minutes: int = 0
    overtime_weekly_minutes: int = 2400
    double_time_daily_minutes: int = 0
    seventh_day_rule: bool = False
    meal_break_after_minutes: int = 0
    meal_break_duration_minutes: int = 0
    rest_break_interval_minutes: int = 0
    rest_break_duration_minutes: int = 0
    predictive_scheduling: bool = False
    advance_notice_hours: int = 0
    clopening_min_hours: int = 0

    @property
    def meal_break_required(self) -> bool:
        return self.meal_break_after_minutes > 0

    @property
    def rest_break_required(self) -> bool:
        return self.rest_break_interval_minutes > 0


_BUNDLES = (
    JurisdictionRules(code="US-FLSA", label="United States (federal)"),
    JurisdictionRules(
        code="US-CA",
        label="California, US",
        overtime_daily_minutes=480,
        double_time_daily_minutes=720,
        seventh_day_rule=True,
        meal_break_after_minutes=300,
        meal_break_duration_minutes=30,
        rest_break_interval_minutes=240,
        rest_break_duration_minutes=10,
    ),
    JurisdictionRules(
        code="US-NY",
        label="New York, US",
        meal_break_after_minutes=360,
        meal_break_duration_minutes=30,
        predictive_scheduling=True,
        advance_notice_hours=72,
        clopening_min_hours=11,
    ),
    JurisdictionRules(
        code="US-OR",
        label="Oregon, US",
        meal_break_after_minutes=360,
        meal_break_duration_minutes=30,
        rest_break_interval_minutes=240,
        rest_break_duration_minutes=10,
        predictive_scheduling=True,
        advance_notice_hours=336,
        clopening_min_hours=10,
    ),
    JurisdictionRules(
        code="US-WA",
        label="Washington, US",
        meal_break_after_minutes=300,
        meal_break_duration_minutes=30,
        rest_break_interval_minutes=240,
        rest_break_duration_minutes=10,
        predictive_scheduling=True,
        advance_notice_hours=336,
        clopening_min_hours=10,
    ),
    JurisdictionRules(
        code="US-IL",
        label="Illinois, US",
        meal_break_after_minutes=450,
        meal_break_duration_minutes=20,
        predictive_scheduling=True,
        advance_notice_hours=240,
        clopening_min_hours=10,
    ),
    JurisdictionRules(
        code="US-CO",
        label="Colorado, US",
        overtime_daily_minutes=720,
        meal_break_after_minutes=300,
        meal_break_duration_minutes=30,
        rest_break_interval_minutes=240,
        rest_break_duration_minutes=10,
    ),
    JurisdictionRules(
        code="UK",
        label="United Kingdom",
        overtime_weekly_minutes=2880,
        meal_break_after_minutes=360,
        meal_break_duration_minutes=20,
    ),
    JurisdictionRules(
        code="AU",
        label="Australia",
        overtime_daily_minutes=456,
        overtime_weekly_minutes=2280,
        meal_break_after_minutes=300,
        meal_break_duration_minutes=30,
    ),
    JurisdictionRules(
        code="EU-DE",
        label="Germany, EU",
        overtime_daily_minutes=480,
        meal_break_after_minutes=360,
        meal_break_duration_minutes=30,
        rest_break_interval_minutes=540,
        rest_break_duration_minutes=15,
    ),
    JurisdictionRules(
        code="EU-FR",
        label="France, EU",
        overtime_daily_minutes=600,
        overtime_weekly_minutes=2100,
        meal_break_after_minutes=360,
        meal_break_duration_minutes=20,
    ),
)

KNOWN_JURISDICTIONS: dict[str, JurisdictionRules] = {b.code: b for b in _BUNDLES}


def get_jurisdiction(code: str | None) -> JurisdictionRules | None:
    """Look up a jurisdiction bundle by code (case-insensitive)."""
    if not code:
        return None
    return KNOWN_JURISDICTIONS.get(code.strip().upper())


def list_jurisdictions() -> list[JurisdictionRules]:
    """Return all known bundles sorted by code."""
    return sorted(KNOWN_JURISDICTIONS.values(), key=lambda b: b.code)
