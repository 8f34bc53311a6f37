"""Weekly overtime calculation with jurisdiction-specific daily rules.

Default (US-FLSA):
    - Weekly overtime after 40 hours
    - No daily overtime threshold

California (US-CA):
    - Daily overtime after 8 hours
    - Daily double-time after 12 hours
    - Weekly overtime after 40 hours
    - 7th consecutive worked day: first 8 hours overtime, beyond 8 double-time
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, timedelta

from time_ledger.calculators.errors import InvalidInputError
from time_ledger.calculators.types import (
    DailyOvertime,
    DayEntry,
    OvertimePolicy,
    OvertimeResult,
)

DAYS_PER_WEEK = 7
SEVENTH_DAY_OVERTIME_MINUTES = 480

PAYROLL_WEEKLY_THRESHOLD_MINUTES = 2400

DEFAULT_OVERTIME_POLICY = OvertimePolicy()


def payroll_overtime_policy(
    weekly_threshold_minutes: int = PAYROLL_WEEKLY_THRESHOLD_MINUTES,
) -> OvertimePolicy:
    """Flat weekly payroll policy with no daily rules.

    Payroll pays on this regardless of the org's compliance policy.
    """
    return OvertimePolicy(
        weekly_threshold_minutes=weekly_threshold_minutes,
        daily_threshold_minutes=0,
        daily_double_time_minutes=0,
        seventh_day_rule=False,
    )


def week_entries(week_start: date, minutes_by_date: Mapping[date, int]) -> list[DayEntry]:
    """Build the 7 Monday-first entries for a week. Missing days are 0."""
    if week_start.weekday() != 0:
        raise InvalidInputError("week_start", week_start, "must be a Monday")
    return [
        DayEntry(date=day, total_minutes=minutes_by_date.get(day, 0))
        for day in (week_start + timedelta(days=i) for i in range(DAYS_PER_WEEK))
    ]


def _validate_week(days: Sequence[DayEntry]) -> None:
    if len(days) != DAYS_PER_WEEK:
        raise InvalidInputError("days", len(days), "expected exactly 7 day entries")
    if days[0].date.weekday() != 0:
        raise InvalidInputError("days", days[0].date, "week must start on a Monday")
    for prev, cur in zip(days, days[1:]):
        if cur.date != prev.date + timedelta(days=1):
            raise InvalidInputError("days", cur.date, "entries must be consecutive days")
    for day in days:
        if day.total_minutes < 0:
            raise InvalidInputError("total_minutes", day.total_minutes, f"negative on {day.date}")


def _allocate_day(minutes: int, policy: OvertimePolicy, is_seventh_day: bool) -> tuple[int, int, int]:
    """Split one day's minutes into (regular, overtime, double_time)."""
    if is_seventh_day:
        overtime = min(minutes, SEVENTH_DAY_OVERTIME_MINUTES)
        return 0, overtime, minutes - overtime

    regular = minutes
    overtime = 0
    double_time = 0

    if policy.daily_double_time_minutes > 0 and regular > policy.daily_double_time_minutes:
        double_time = regular - policy.daily_double_time_minutes
        regular -= double_time

    if policy.daily_threshold_minutes > 0 and regular > policy.daily_threshold_minutes:
        overtime = regular - policy.daily_threshold_minutes
        regular = policy.daily_threshold_minutes

    return regular, overtime, double_time


def calculate_weekly_overtime(
    days: Sequence[DayEntry],
    policy: OvertimePolicy = DEFAULT_OVERTIME_POLICY,
) -> OvertimeResult:
    """Split a week of daily totals into regular, overtime and double-time.

    Args:
        days: Exactly 7 consecutive entries, Monday first
        policy: Thresholds to apply

    Returns:
        Weekly totals plus the per-day allocation before the weekly pass.
        regular + overtime + double_time always equals the input sum.

    Raises:
        InvalidInputError: If the week is malformed or has negative minutes
    """
    _validate_week(days)

    weekly_regular = 0
    weekly_overtime = 0
    weekly_double_time = 0
    consecutive_days = 0
    breakdown: list[DailyOvertime] = []

    for day in days:
        minutes = day.total_minutes
        consecutive_days = consecutive_days + 1 if minutes > 0 else 0
        is_seventh_day = (
            policy.seventh_day_rule and minutes > 0 and consecutive_days >= DAYS_PER_WEEK
        )

        regular, overtime, double_time = _allocate_day(minutes, policy, is_seventh_day)

        weekly_regular += regular
        weekly_overtime += overtime
        weekly_double_time += double_time
        breakdown.append(
            DailyOvertime(
                date=day.date,
                regular_minutes=regular,
                overtime_minutes=overtime,
                double_time_minutes=double_time,
            )
        )

    # Only regular minutes roll into the weekly threshold, so daily OT is never counted twice
    if policy.weekly_threshold_minutes > 0 and weekly_regular > policy.weekly_threshold_minutes:
        excess = weekly_regular - policy.weekly_threshold_minutes
        weekly_overtime += excess
        weekly_regular = policy.weekly_threshold_minutes

    return OvertimeResult(
        regular_minutes=weekly_regular,
        overtime_minutes=weekly_overtime,
        double_time_minutes=weekly_double_time,
        daily_breakdown=breakdown,
    )


def is_daily_overtime(total_minutes: int, policy: OvertimePolicy = DEFAULT_OVERTIME_POLICY) -> bool:
    """Check if a day's total exceeds the daily overtime threshold."""
    if policy.daily_threshold_minutes <= 0:
        return False
    return total_minutes > policy.daily_threshold_minutes


def is_weekly_overtime(
    total_week_minutes: int, policy: OvertimePolicy = DEFAULT_OVERTIME_POLICY
) -> bool:
    """Check if a week's total exceeds the weekly overtime threshold."""
    if policy.weekly_threshold_minutes <= 0:
        return False
    return total_week_minutes > policy.weekly_threshold_minutes
