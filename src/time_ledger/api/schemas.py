"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from time_ledger.calculators.types import (
    CompTimeStatus,
    CompTimeType,
    LeaveType,
    LocationCategory,
)


# ============================================================================
# Work day schemas
# ============================================================================


class BreakViolationResponse(BaseModel):
    """A missed meal or rest break."""

    model_config = ConfigDict(from_attributes=True)

    kind: str
    required_minutes: int
    recorded_minutes: int
    explanation: str


class DaySummaryResponse(BaseModel):
    """Schema for a recomputed work day."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    date: date
    total_minutes: int
    break_minutes: int
    first_clock_in: datetime | None = None
    last_clock_out: datetime | None = None
    meets_policy: bool
    location_id: UUID | None = None
    event_count: int
    anomalies: list[str] = Field(default_factory=list)
    break_violations: list[BreakViolationResponse] = Field(default_factory=list)


class RecomputeResponse(BaseModel):
    """Result of a work day recompute. summary is null when no events remain."""

    user_id: UUID
    date: date
    summary: DaySummaryResponse | None = None


# ============================================================================
# Overtime schemas
# ============================================================================


class DayEntryInput(BaseModel):
    """One day of worked minutes."""

    date: date
    total_minutes: int = Field(ge=0)


class OvertimePreviewRequest(BaseModel):
    """Week of daily totals to split; jurisdiction selects the policy."""

    days: list[DayEntryInput]
    jurisdiction: str | None = None


class DailyOvertimeResponse(BaseModel):
    """Per-day allocation."""

    model_config = ConfigDict(from_attributes=True)

    date: date
    regular_minutes: int
    overtime_minutes: int
    double_time_minutes: int


class OvertimePolicyResponse(BaseModel):
    """Thresholds used for a split."""

    model_config = ConfigDict(from_attributes=True)

    weekly_threshold_minutes: int
    daily_threshold_minutes: int
    daily_double_time_minutes: int
    seventh_day_rule: bool


class OvertimeResponse(BaseModel):
    """Weekly overtime split."""

    model_config = ConfigDict(from_attributes=True)

    regular_minutes: int
    overtime_minutes: int
    double_time_minutes: int
    total_minutes: int
    daily_breakdown: list[DailyOvertimeResponse]
    policy: OvertimePolicyResponse | None = None


# ============================================================================
# Leave schemas
# ============================================================================


class PtoBalanceResponse(BaseModel):
    """Point-in-time PTO balance."""

    model_config = ConfigDict(from_attributes=True)

    annual_allowance: int
    carryover: int
    taken: int
    remaining: int
    leave_year_start: date
    leave_year_end: date
    prior_year_start: date
    prior_year_end: date
    override_applied: bool


# ============================================================================
# Comp time schemas
# ============================================================================


class CompTimeEntryResponse(BaseModel):
    """One comp time ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    entry_id: UUID | None = None
    user_id: UUID
    source_date: date
    entry_type: CompTimeType
    minutes_earned: int
    minutes_used: int
    remaining_minutes: int
    expires_at: datetime
    status: CompTimeStatus
    callout_id: UUID | None = None
    description: str | None = None


class CompTimeBalanceResponse(BaseModel):
    """Unused, unexpired comp time."""

    model_config = ConfigDict(from_attributes=True)

    total_minutes: int
    available_hours: int
    available_remaining_minutes: int
    expiring_minutes: int
    expiring_hours: int
    expiring_within_days: int
    as_of: datetime


class CompTimeResponse(BaseModel):
    """Comp time entries with their balance."""

    entries: list[CompTimeEntryResponse]
    balance: CompTimeBalanceResponse


class CompTimeGrantRequest(BaseModel):
    """Manual comp time grant."""

    minutes_earned: int = Field(gt=0)
    source_date: date | None = None
    description: str | None = None


# ============================================================================
# ============================================================================
# Timesheet schemas
# ============================================================================


class TimesheetDayResponse(BaseModel):
    """One day line of a timesheet."""

    model_config = ConfigDict(from_attributes=True)

    date: date
    total_minutes: int
    callout_minutes: int
    location_id: UUID | None = None
    category: LocationCategory | None = None
    is_leave: bool
    leave_type: LeaveType | None = None


class WeeklyTimesheetResponse(BaseModel):
    """One ISO week of a timesheet."""

    model_config = ConfigDict(from_attributes=True)

    week_start: date
    week_end: date
    period_start: date
    period_end: date
    regular_minutes: int
    overtime_minutes: int
    double_time_minutes: int
    callout_minutes: int
    onsite_minutes: int
    remote_minutes: int
    leave_days: int
    total_minutes: int
    days: list[TimesheetDayResponse]


class TimesheetTotalsResponse(BaseModel):
    """Additive totals over the requested range."""

    model_config = ConfigDict(from_attributes=True)

    regular_minutes: int
    overtime_minutes: int
    double_time_minutes: int
    callout_minutes: int
    onsite_minutes: int
    remote_minutes: int
    leave_days: int
    total_minutes: int


class TimesheetResponse(BaseModel):
    """Payroll timesheet."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    period_start: date
    period_end: date
    weeks: list[WeeklyTimesheetResponse]
    totals: TimesheetTotalsResponse


# ============================================================================
# Policy schemas
# ============================================================================


class PolicyResponse(BaseModel):
    """Effective policy."""

    model_config = ConfigDict(from_attributes=True)

    policy_id: UUID | None = None
    org_id: UUID
    jurisdiction: str | None = None
    required_days_per_week: int
    minimum_minutes_per_day: int
    overtime_threshold_daily: int | None = None
    overtime_threshold_weekly: int | None = None
    daily_double_time_minutes: int | None = None
    seventh_day_rule: bool | None = None
    meal_break_required: bool
    meal_break_after_minutes: int
    rest_break_interval: int
    annual_pto_days: int
    max_carryover_days: int
    leave_year_start_month: int
    leave_year_start_day: int
    effective_date: date
    is_active: bool
    is_system_default: bool
    overtime_policy: OvertimePolicyResponse | None = None


class JurisdictionResponse(BaseModel):
    """Known jurisdiction bundle."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    label: str
    overtime_daily_minutes: int
    overtime_weekly_minutes: int
    double_time_daily_minutes: int
    seventh_day_rule: bool
    meal_break_after_minutes: int
    meal_break_duration_minutes: int
    rest_break_interval_minutes: int
    rest_break_duration_minutes: int
    predictive_scheduling: bool
    advance_notice_hours: int
    clopening_min_hours: int


class JurisdictionListResponse(BaseModel):
    """Jurisdiction table with its version."""

    version: str
    items: list[JurisdictionResponse]


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str
    code: str | None = None
