"""Tests for PTO balance calculation."""

from dataclasses import replace
from datetime import date, timedelta
from uuid import uuid4

import pytest

from time_ledger.calculators.errors import InvalidInputError
from time_ledger.calculators.leave_balance import (
    calculate_pto_balance,
    carryover_days,
    count_approved_pto,
    leave_year_window,
    resolve_allowance,
)
from time_ledger.calculators.types import (
    LeaveAllowanceOverride,
    LeaveRequest,
    LeaveStatus,
    LeaveType,
)


def approved(user_id, org_id, day: date, leave_type: LeaveType = LeaveType.PTO) -> LeaveRequest:
    return LeaveRequest(
        user_id=user_id,
        org_id=org_id,
        date=day,
        leave_type=leave_type,
        status=LeaveStatus.APPROVED,
    )


def days_from(start: date, count: int) -> list[date]:
    return [start + timedelta(days=i) for i in range(count)]


class TestLeaveYearWindow:
    """Anchored leave-year windows."""

    def test_calendar_year(self):
        window = leave_year_window(date(2024, 6, 15), 1, 1)

        assert window.start == date(2024, 1, 1)
        assert window.end == date(2024, 12, 31)
        assert window.prior_start == date(2023, 1, 1)
        assert window.prior_end == date(2023, 12, 31)

    def test_day_before_anchor_belongs_to_previous_year(self):
        """April 6 anchor; April 5 is the last day of the prior leave year."""
        window = leave_year_window(date(2024, 4, 5), 4, 6)

        assert window.start == date(2023, 4, 6)
        assert window.end == date(2024, 4, 5)

    def test_anchor_day_starts_new_year(self):
        window = leave_year_window(date(2024, 4, 6), 4, 6)

        assert window.start == date(2024, 4, 6)
        assert window.end == date(2025, 4, 5)
        assert window.prior_start == date(2023, 4, 6)
        assert window.prior_end == date(2024, 4, 5)

    def test_day_before_january_anchor(self):
        window = leave_year_window(date(2024, 12, 31), 1, 1)

        assert window.start == date(2024, 1, 1)
        assert window.end == date(2024, 12, 31)

    def test_feb_29_anchor_clamps_in_common_years(self):
        window = leave_year_window(date(2023, 3, 1), 2, 29)

        assert window.start == date(2023, 2, 28)
        assert window.end == date(2024, 2, 28)

    def test_day_31_anchor_in_short_month(self):
        window = leave_year_window(date(2024, 5, 1), 4, 31)

        assert window.start == date(2024, 4, 30)

    @pytest.mark.parametrize("month,day", [(0, 1), (13, 1), (1, 0), (1, 32)])
    def test_out_of_range_anchor_rejected(self, month, day):
        with pytest.raises(InvalidInputError):
            leave_year_window(date(2024, 6, 1), month, day)

    def test_contains(self):
        window = leave_year_window(date(2024, 6, 15), 1, 1)

        assert window.contains(date(2024, 12, 31))
        assert not window.contains(date(2025, 1, 1))
        assert window.prior_contains(date(2023, 1, 1))


class TestAllowanceResolution:
    """Override precedence: year-specific, permanent, org default."""

    def test_org_default(self, user_id, org_id):
        assert resolve_allowance([], user_id, org_id, 2024, 10) == (10, False)

    def test_permanent_override(self, user_id, org_id):
        overrides = [LeaveAllowanceOverride(user_id, org_id, 15)]

        assert resolve_allowance(overrides, user_id, org_id, 2024, 10) == (15, True)

    def test_year_specific_beats_permanent(self, user_id, org_id):
        overrides = [
            LeaveAllowanceOverride(user_id, org_id, 15),
            LeaveAllowanceOverride(user_id, org_id, 20, effective_year=2024),
        ]

        assert resolve_allowance(overrides, user_id, org_id, 2024, 10) == (20, True)
        assert resolve_allowance(overrides, user_id, org_id, 2025, 10) == (15, True)

    def test_other_users_ignored(self, user_id, org_id):
        overrides = [LeaveAllowanceOverride(uuid4(), org_id, 30)]

        assert resolve_allowance(overrides, user_id, org_id, 2024, 10) == (10, False)

    def test_duplicates_resolve_to_largest(self, user_id, org_id, caplog):
        overrides = [
            LeaveAllowanceOverride(user_id, org_id, 12, effective_year=2024),
            LeaveAllowanceOverride(user_id, org_id, 18, effective_year=2024),
        ]

        with caplog.at_level("WARNING", logger="time_ledger.calculators.leave_balance"):
            assert resolve_allowance(overrides, user_id, org_id, 2024, 10) == (18, True)

        assert caplog.records


class TestCarryover:
    """Carryover is capped."""

    def test_capped_at_max(self):
        """10 allowed, 2 used, cap 5: carry 5 not 8."""
        assert carryover_days(10, 2, 5) == 5

    def test_below_cap(self):
        assert carryover_days(10, 8, 5) == 2

    def test_overspent_prior_year(self):
        assert carryover_days(10, 12, 5) == 0

    def test_disabled(self):
        assert carryover_days(10, 0, 0) == 0


class TestCountApprovedPto:
    """Only approved PTO in range counts."""

    def test_filters(self, user_id, org_id):
        requests = [
            approved(user_id, org_id, date(2024, 2, 1)),
            approved(user_id, org_id, date(2024, 2, 2), LeaveType.SICK),
            replace(approved(user_id, org_id, date(2024, 2, 3)), status=LeaveStatus.PENDING),
            approved(uuid4(), org_id, date(2024, 2, 4)),
            approved(user_id, org_id, date(2025, 1, 1)),
        ]

        assert count_approved_pto(requests, user_id, date(2024, 1, 1), date(2024, 12, 31)) == 1


class TestCalculatePtoBalance:
    """End to end balance."""

    def test_carryover_scenario(self, user_id, org_id, default_policy):
        """Prior year used 2 of 10 with a cap of 5: carryover is 5."""
        requests = [approved(user_id, org_id, d) for d in (date(2023, 3, 1), date(2023, 3, 2))]

        balance = calculate_pto_balance(
            user_id, org_id, date(2024, 6, 1), default_policy, leave_requests=requests
        )

        assert balance.annual_allowance == 10
        assert balance.carryover == 5
        assert balance.taken == 0
        assert balance.remaining == 15
        assert balance.override_applied is False

    def test_remaining_subtracts_taken(self, user_id, org_id, default_policy):
        requests = [approved(user_id, org_id, d) for d in days_from(date(2024, 3, 4), 3)]
        policy = replace(default_policy, max_carryover_days=0)

        balance = calculate_pto_balance(user_id, org_id, date(2024, 6, 1), policy, leave_requests=requests)

        assert balance.taken == 3
        assert balance.carryover == 0
        assert balance.remaining == 7

    def test_remaining_can_go_negative(self, user_id, org_id, default_policy):
        requests = [approved(user_id, org_id, d) for d in days_from(date(2024, 3, 4), 12)]
        policy = replace(default_policy, max_carryover_days=0)

        balance = calculate_pto_balance(user_id, org_id, date(2024, 6, 1), policy, leave_requests=requests)

        assert balance.remaining == -2

    def test_override_applies_to_current_year(self, user_id, org_id, default_policy):
        overrides = [LeaveAllowanceOverride(user_id, org_id, 25, effective_year=2024)]

        balance = calculate_pto_balance(
            user_id, org_id, date(2024, 6, 1), default_policy, overrides=overrides
        )

        assert balance.annual_allowance == 25
        assert balance.override_applied is True

    def test_prior_year_override_drives_carryover(self, user_id, org_id, default_policy):
        overrides = [LeaveAllowanceOverride(user_id, org_id, 3, effective_year=2023)]

        balance = calculate_pto_balance(
            user_id, org_id, date(2024, 6, 1), default_policy, overrides=overrides
        )

        assert balance.annual_allowance == 10
        assert balance.carryover == 3

    def test_window_reported(self, user_id, org_id, default_policy):
        policy = replace(default_policy, leave_year_start_month=4, leave_year_start_day=6)

        balance = calculate_pto_balance(user_id, org_id, date(2024, 4, 5), policy)

        assert balance.leave_year_start == date(2023, 4, 6)
        assert balance.leave_year_end == date(2024, 4, 5)
        assert balance.prior_year_start == date(2022, 4, 6)
        assert balance.prior_year_end == date(2023, 4, 5)

    def test_leave_outside_window_ignored(self, user_id, org_id, default_policy):
        policy = replace(default_policy, max_carryover_days=0)
        requests = [approved(user_id, org_id, date(2025, 1, 2))]

        balance = calculate_pto_balance(user_id, org_id, date(2024, 6, 1), policy, leave_requests=requests)

        assert balance.taken == 0
