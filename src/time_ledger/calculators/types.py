"""Type definitions for the time ledger calculators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import UUID


class EventType(str, Enum):
    """Raw clock event types."""

    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"


class LeaveStatus(str, Enum):
    """Leave request status values."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class LeaveType(str, Enum):
    """Leave request types."""

    PTO = "PTO"
    SICK = "SICK"
    UNPAID = "UNPAID"
    OTHER = "OTHER"


class LocationCategory(str, Enum):
    """Location categories. HOME counts as remote work."""

    OFFICE = "OFFICE"
    CLIENT = "CLIENT"
    HOME = "HOME"
    OTHER = "OTHER"


class CompTimeStatus(str, Enum):
    """Comp time entry status values."""

    AVAILABLE = "AVAILABLE"
    PARTIALLY_USED = "PARTIALLY_USED"
    USED = "USED"
    EXPIRED = "EXPIRED"


class CompTimeType(str, Enum):
    """How comp time was earned."""

    CALLOUT = "CALLOUT"
    MANUAL = "MANUAL"


@dataclass(frozen=True)
class RawEvent:
    """An immutable clock/break fact from the event ledger."""

    event_id: UUID
    user_id: UUID
    event_type: EventType
    server_timestamp: datetime
    client_timestamp: datetime | None = None
    location_id: UUID | None = None


@dataclass(frozen=True)
class Policy:
    """Compliance, overtime and leave policy for an organization.

    Threshold fields left as None inherit from the jurisdiction bundle.
    """

    org_id: UUID
    policy_id: UUID | None = None
    jurisdiction: str | None = None
    required_days_per_week: int = 3
    minimum_minutes_per_day: int = 480
    overtime_threshold_daily: int | None = None
    overtime_threshold_weekly: int | None = None
    daily_double_time_minutes: int | None = None
    seventh_day_rule: bool | None = None
    meal_break_required: bool = False
    meal_break_after_minutes: int = 0
    rest_break_interval: int = 0
    annual_pto_days: int = 0
    max_carryover_days: int = 0
    leave_year_start_month: int = 1
    leave_year_start_day: int = 1
    effective_date: date = date.min
    is_active: bool = True

    @property
    def is_system_default(self) -> bool:
        return self.policy_id is None


@dataclass(frozen=True)
class LeaveAllowanceOverride:
    """Per-employee annual PTO allowance. effective_year None = permanent."""

    user_id: UUID
    org_id: UUID
    annual_pto_days: int
    effective_year: int | None = None


@dataclass(frozen=True)
class LeaveRequest:
    """A single-day leave request."""

    user_id: UUID
    org_id: UUID
    date: date
    leave_type: LeaveType = LeaveType.PTO
    status: LeaveStatus = LeaveStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == LeaveStatus.APPROVED


@dataclass(frozen=True)
class Callout:
    """An incident response that counts toward the payroll week."""

    callout_id: UUID
    user_id: UUID
    time_received: datetime
    time_started: datetime | None = None
    time_ended: datetime | None = None
    priority: str = "NORMAL"
    location_id: UUID | None = None

    @property
    def worked_minutes(self) -> int:
        if self.time_started is None or self.time_ended is None:
            return 0
        seconds = (self.time_ended - self.time_started).total_seconds()
        return max(0, int(seconds // 60))


@dataclass(frozen=True)
class CompTimeEntry:
    """Compensatory minutes earned on a source date, usable until expires_at."""

    user_id: UUID
    org_id: UUID
    source_date: date
    minutes_earned: int
    expires_at: datetime
    minutes_used: int = 0
    status: CompTimeStatus = CompTimeStatus.AVAILABLE
    entry_type: CompTimeType = CompTimeType.MANUAL
    entry_id: UUID | None = None
    callout_id: UUID | None = None
    description: str | None = None

    @property
    def remaining_minutes(self) -> int:
        return max(0, self.minutes_earned - self.minutes_used)


@dataclass(frozen=True)
class CompTimeBalance:
    """Unused, unexpired comp time as of an instant."""

    total_minutes: int
    expiring_minutes: int
    expiring_within_days: int
    as_of: datetime

    @property
    def available_hours(self) -> int:
        return self.total_minutes // 60

    @property
    def available_remaining_minutes(self) -> int:
        return self.total_minutes % 60

    @property
    def expiring_hours(self) -> int:
        return self.expiring_minutes // 60


@dataclass(frozen=True)
class DaySummary:
    """Canonical daily aggregate for one user and local date."""

    user_id: UUID | None
    date: date
    total_minutes: int
    break_minutes: int
    first_clock_in: datetime | None
    last_clock_out: datetime | None
    meets_policy: bool
    location_id: UUID | None
    event_count: int = 0
    anomalies: tuple[str, ...] = ()

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for comparison and hashing."""
        return {
            "user_id": str(self.user_id) if self.user_id else None,
            "date": self.date.isoformat(),
            "total_minutes": self.total_minutes,
            "break_minutes": self.break_minutes,
            "first_clock_in": self.first_clock_in.isoformat() if self.first_clock_in else None,
            "last_clock_out": self.last_clock_out.isoformat() if self.last_clock_out else None,
            "meets_policy": self.meets_policy,
            "location_id": str(self.location_id) if self.location_id else None,
            "event_count": self.event_count,
        }


@dataclass(frozen=True)
class BreakViolation:
    """A missed meal or rest break for a day."""

    kind: str  # 'meal' or 'rest'
    required_minutes: int
    recorded_minutes: int
    explanation: str


@dataclass(frozen=True)
class OvertimePolicy:
    """Thresholds used by the overtime calculator. 0 disables a rule."""

    weekly_threshold_minutes: int = 2400
    daily_threshold_minutes: int = 0
    daily_double_time_minutes: int = 0
    seventh_day_rule: bool = False


@dataclass(frozen=True)
class DayEntry:
    """Worked minutes for one day of a week."""

    date: date
    total_minutes: int


@dataclass(frozen=True)
class DailyOvertime:
    """Per-day bucket allocation before the weekly pass."""

    date: date
    regular_minutes: int
    overtime_minutes: int
    double_time_minutes: int


@dataclass
class OvertimeResult:
    """Regular/overtime/double-time split for one ISO week."""

    regular_minutes: int
    overtime_minutes: int
    double_time_minutes: int
    daily_breakdown: list[DailyOvertime] = field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        return self.regular_minutes + self.overtime_minutes + self.double_time_minutes


@dataclass(frozen=True)
class LeaveYearWindow:
    """Current and prior leave-year windows, both inclusive."""

    start: date
    end: date
    prior_start: date
    prior_end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def prior_contains(self, day: date) -> bool:
        return self.prior_start <= day <= self.prior_end


@dataclass(frozen=True)
class PtoBalance:
    """Point-in-time PTO balance. remaining may be negative."""

    annual_allowance: int
    carryover: int
    taken: int
    remaining: int
    leave_year_start: date
    leave_year_end: date
    prior_year_start: date
    prior_year_end: date
    override_applied: bool


@dataclass(frozen=True)
class TimesheetDay:
    """One day line of a weekly timesheet."""

    date: date
    total_minutes: int
    callout_minutes: int = 0
    location_id: UUID | None = None
    category: LocationCategory | None = None
    is_leave: bool = False
    leave_type: LeaveType | None = None


@dataclass
class WeeklyTimesheet:
    """Payroll figures for one ISO week, clipped to the requested period."""

    week_start: date
    week_end: date
    period_start: date
    period_end: date
    regular_minutes: int = 0
    overtime_minutes: int = 0
    double_time_minutes: int = 0
    callout_minutes: int = 0
    onsite_minutes: int = 0
    remote_minutes: int = 0
    leave_days: int = 0
    days: list[TimesheetDay] = field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        return self.regular_minutes + self.overtime_minutes + self.double_time_minutes


@dataclass
class TimesheetTotals:
    """Additive rollup of weekly timesheets."""

    regular_minutes: int = 0
    overtime_minutes: int = 0
    double_time_minutes: int = 0
    callout_minutes: int = 0
    onsite_minutes: int = 0
    remote_minutes: int = 0
    leave_days: int = 0

    @property
    def total_minutes(self) -> int:
        return self.regular_minutes + self.overtime_minutes + self.double_time_minutes

    def add(self, week: WeeklyTimesheet) -> None:
        self.regular_minutes += week.regular_minutes
        self.overtime_minutes += week.overtime_minutes
        self.double_time_minutes += week.double_time_minutes
        self.callout_minutes += week.callout_minutes
        self.onsite_minutes += week.onsite_minutes
        self.remote_minutes += week.remote_minutes
        self.leave_days += week.leave_days


@dataclass
class Timesheet:
    """Payroll timesheet for a user over a week or month."""

    user_id: UUID
    period_start: date
    period_end: date
    weeks: list[WeeklyTimesheet] = field(default_factory=list)
    totals: TimesheetTotals = field(default_factory=TimesheetTotals)
