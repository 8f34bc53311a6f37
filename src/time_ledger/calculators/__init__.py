"""Time ledger calculators."""

from time_ledger.calculators.comp_time import calculate_comp_time_balance
from time_ledger.calculators.day_aggregator import aggregate_day, evaluate_break_compliance
from time_ledger.calculators.errors import ConfigurationMissingError, InvalidInputError
from time_ledger.calculators.leave_balance import calculate_pto_balance, leave_year_window
from time_ledger.calculators.overtime import (
    calculate_weekly_overtime,
    payroll_overtime_policy,
)
from time_ledger.calculators.policy_resolver import (
    overtime_policy_for,
    resolve_effective_policy,
)
from time_ledger.calculators.timesheet import build_timesheet

__all__ = [
    "calculate_comp_time_balance",
    "aggregate_day",
    "evaluate_break_compliance",
    "ConfigurationMissingError",
    "InvalidInputError",
    "calculate_pto_balance",
    "leave_year_window",
    "calculate_weekly_overtime",
    "payroll_overtime_policy",
    "overtime_policy_for",
    "resolve_effective_policy",
    "build_timesheet",
]
