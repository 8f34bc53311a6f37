"""PTO balance calculation across anchored leave years."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, timedelta
from uuid import UUID

from time_ledger.calculators.dates import anchor_date
from time_ledger.calculators.types import (
    LeaveAllowanceOverride,
    LeaveRequest,
    LeaveType,
    LeaveYearWindow,
    Policy,
    PtoBalance,
)

logger = logging.getLogger(__name__)


def leave_year_window(reference_date: date, start_month: int, start_day: int) -> LeaveYearWindow:
    """Resolve the current and prior leave-year windows for a date.

    The current year starts on this calendar year's anchor when
    reference_date is on or after it, otherwise on last year's anchor.
    Each window ends the day before the next anchor.
    """
    this_year_anchor = anchor_date(reference_date.year, start_month, start_day)
    if reference_date >= this_year_anchor:
        start = this_year_anchor
    else:
        start = anchor_date(reference_date.year - 1, start_month, start_day)

    end = anchor_date(start.year + 1, start_month, start_day) - timedelta(days=1)
    prior_start = anchor_date(start.year - 1, start_month, start_day)
    prior_end = start - timedelta(days=1)

    return LeaveYearWindow(start=start, end=end, prior_start=prior_start, prior_end=prior_end)


def resolve_allowance(
    overrides: Iterable[LeaveAllowanceOverride],
    user_id: UUID,
    org_id: UUID,
    leave_year: int,
    default_days: int,
) -> tuple[int, bool]:
    """Resolve an employee's annual allowance for a leave year.

    Priority:
    1. Override whose effective_year equals leave_year
    2. Permanent override (effective_year is None)
    3. The org default

    Duplicates at the same level resolve to the largest allowance.

    Returns:
        (allowance in days, whether an override was applied)
    """
    mine = [o for o in overrides if o.user_id == user_id and o.org_id == org_id]
    year_specific = [o for o in mine if o.effective_year == leave_year]
    permanent = [o for o in mine if o.effective_year is None]

    for level, matches in (("year-specific", year_specific), ("permanent", permanent)):
        if not matches:
            continue
        if len(matches) > 1:
            logger.warning(
                "User %s has %d %s leave overrides for %s; using the largest",
                user_id,
                len(matches),
                level,
                leave_year,
            )
        return max(o.annual_pto_days for o in matches), True

    return default_days, False


def count_approved_pto(requests: Iterable[LeaveRequest], user_id: UUID, start: date, end: date) -> int:
    """Count approved PTO days for a user in an inclusive date range."""
    return sum(
        1
        for r in requests
        if r.user_id == user_id
        and r.is_approved
        and r.leave_type == LeaveType.PTO
        and start <= r.date <= end
    )


def carryover_days(prior_allowance: int, prior_taken: int, max_carryover_days: int) -> int:
    """Unused prior-year days, capped at max_carryover_days."""
    if max_carryover_days <= 0:
        return 0
    return min(max(0, prior_allowance - prior_taken), max_carryover_days)


def compute_balance(
    window: LeaveYearWindow,
    policy: Policy,
    overrides: Iterable[LeaveAllowanceOverride],
    user_id: UUID,
    org_id: UUID,
    taken: int,
    prior_taken: int,
) -> PtoBalance:
    """Assemble a PtoBalance from already-counted current and prior usage."""
    overrides = list(overrides)
    allowance, override_applied = resolve_allowance(
        overrides, user_id, org_id, window.start.year, policy.annual_pto_days
    )

    carryover = 0
    if policy.max_carryover_days > 0:
        prior_allowance, _ = resolve_allowance(
            overrides, user_id, org_id, window.prior_start.year, policy.annual_pto_days
        )
        carryover = carryover_days(prior_allowance, prior_taken, policy.max_carryover_days)

    return PtoBalance(
        annual_allowance=allowance,
        carryover=carryover,
        taken=taken,
        remaining=allowance + carryover - taken,
        leave_year_start=window.start,
        leave_year_end=window.end,
        prior_year_start=window.prior_start,
        prior_year_end=window.prior_end,
        override_applied=override_applied,
    )


def calculate_pto_balance(
    user_id: UUID,
    org_id: UUID,
    reference_date: date,
    policy: Policy,
    overrides: Iterable[LeaveAllowanceOverride] = (),
    leave_requests: Iterable[LeaveRequest] = (),
) -> PtoBalance:
    """Calculate a point-in-time PTO balance.

    remaining = allowance + carryover - taken, and may be negative when
    more leave was approved than allowed.
    """
    window = leave_year_window(
        reference_date, policy.leave_year_start_month, policy.leave_year_start_day
    )
    requests = list(leave_requests)
    taken = count_approved_pto(requests, user_id, window.start, window.end)
    prior_taken = count_approved_pto(requests, user_id, window.prior_start, window.prior_end)
    return compute_balance(window, policy, overrides, user_id, org_id, taken, prior_taken)
