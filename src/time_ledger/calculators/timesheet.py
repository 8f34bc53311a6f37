"""Payroll timesheet aggregation over ISO weeks."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from uuid import UUID

from time_ledger.calculators.dates import iso_week_start, iso_weeks, local_date, month_bounds
from time_ledger.calculators.overtime import (
    calculate_weekly_overtime,
    payroll_overtime_policy,
    week_entries,
)
from time_ledger.calculators.types import (
    Callout,
    DaySummary,
    LeaveRequest,
    LeaveType,
    LocationCategory,
    OvertimePolicy,
    Timesheet,
    TimesheetDay,
    WeeklyTimesheet,
)


def month_period(year: int, month: int) -> tuple[date, date]:
    """Return the inclusive date range of a calendar month."""
    return month_bounds(year, month)


def week_period(day: date) -> tuple[date, date]:
    """Return the inclusive Monday..Sunday range containing day."""
    start = iso_week_start(day)
    return start, start + timedelta(days=6)


def _callout_minutes_by_date(
    user_id: UUID, callouts: Iterable[Callout], tz_name: str
) -> dict[date, int]:
    minutes: dict[date, int] = defaultdict(int)
    for callout in callouts:
        if callout.user_id != user_id:
            continue
        worked = callout.worked_minutes
        if worked > 0:
            minutes[local_date(callout.time_received, tz_name)] += worked
    return minutes


def _build_week(
    week_start: date,
    week_end: date,
    clip_start: date,
    clip_end: date,
    summaries: Mapping[date, DaySummary],
    callout_minutes: Mapping[date, int],
    leave: Mapping[date, LeaveRequest],
    location_categories: Mapping[UUID, LocationCategory],
    policy: OvertimePolicy,
) -> WeeklyTimesheet:
    week = WeeklyTimesheet(
        week_start=week_start,
        week_end=week_end,
        period_start=clip_start,
        period_end=clip_end,
    )
    minutes_by_date: dict[date, int] = {}

    day = clip_start
    while day <= clip_end:
        summary = summaries.get(day)
        worked = summary.total_minutes if summary else 0
        incident = callout_minutes.get(day, 0)
        location_id = summary.location_id if summary else None
        category = location_categories.get(location_id) if location_id else None
        request = leave.get(day)

        # Incident minutes count toward the week before overtime is split
        minutes_by_date[day] = worked + incident
        week.callout_minutes += incident
        if category == LocationCategory.HOME:
            week.remote_minutes += worked
        elif worked > 0:
            week.onsite_minutes += worked
        if request is not None:
            week.leave_days += 1

        week.days.append(
            TimesheetDay(
                date=day,
                total_minutes=worked,
                callout_minutes=incident,
                location_id=location_id,
                category=category,
                is_leave=request is not None,
                leave_type=LeaveType(request.leave_type) if request is not None else None,
            )
        )
        day += timedelta(days=1)

    split = calculate_weekly_overtime(week_entries(week_start, minutes_by_date), policy)
    week.regular_minutes = split.regular_minutes
    week.overtime_minutes = split.overtime_minutes
    week.double_time_minutes = split.double_time_minutes
    return week


def build_timesheet(
    user_id: UUID,
    period_start: date,
    period_end: date,
    summaries: Iterable[DaySummary],
    *,
    tz_name: str,
    callouts: Iterable[Callout] = (),
    leave_requests: Iterable[LeaveRequest] = (),
    location_categories: Mapping[UUID, LocationCategory] | None = None,
    policy: OvertimePolicy | None = None,
) -> Timesheet:
    """Build a payroll timesheet for an inclusive date range.

    The range is split into ISO weeks clipped to the range. Each week is
    classified on its own; range totals are the plain sum of the weeks and
    are never re-split against a monthly threshold. Summaries, callouts and
    leave belonging to other users are ignored. Without an explicit policy
    the flat payroll week applies.
    """
    by_date = {
        s.date: s
        for s in summaries
        if s.user_id == user_id and period_start <= s.date <= period_end
    }
    callout_minutes = _callout_minutes_by_date(user_id, callouts, tz_name)
    leave = {
        r.date: r
        for r in leave_requests
        if r.user_id == user_id and r.is_approved and period_start <= r.date <= period_end
    }

    policy = policy or payroll_overtime_policy()

    timesheet = Timesheet(user_id=user_id, period_start=period_start, period_end=period_end)
    for week_start, week_end, clip_start, clip_end in iso_weeks(period_start, period_end):
        week = _build_week(
            week_start,
            week_end,
            clip_start,
            clip_end,
            by_date,
            callout_minutes,
            leave,
            location_categories or {},
            policy,
        )
        timesheet.weeks.append(week)
        timesheet.totals.add(week)

    return timesheet
