"""Policy, leave override and leave request models."""

from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from time_ledger.calculators.types import (
    LeaveAllowanceOverride as AllowanceOverrideRecord,
    LeaveRequest as LeaveRequestRecord,
    LeaveStatus,
    LeaveType,
    Policy,
)
from time_ledger.models.base import Base, TimestampMixin


class PolicyConfig(Base, TimestampMixin):
    """Versioned compliance/overtime/leave policy for an org.

    jurisdiction NULL is the org default. Threshold columns left NULL
    inherit from the jurisdiction bundle.
    """

    __tablename__ = "policy_config"

    policy_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    org_id: Mapped[UUID] = mapped_column(nullable=False)
    jurisdiction: Mapped[str | None] = mapped_column(String, nullable=True)
    required_days_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    minimum_minutes_per_day: Mapped[int] = mapped_column(Integer, nullable=False, default=480)
    overtime_threshold_daily: Mapped[int | None] = mapped_column(Integer, nullable=True)
    overtime_threshold_weekly: Mapped[int | None] = mapped_column(Integer, nullable=True)
    daily_double_time_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    seventh_day_rule: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    meal_break_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    meal_break_after_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rest_break_interval: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    annual_pto_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_carryover_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leave_year_start_month: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    leave_year_start_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "leave_year_start_month BETWEEN 1 AND 12",
            name="policy_config_leave_month_check",
        ),
        CheckConstraint(
            "leave_year_start_day BETWEEN 1 AND 31",
            name="policy_config_leave_day_check",
        ),
        Index("policy_config_org_active_idx", "org_id", "is_active"),
    )

    def to_domain(self) -> Policy:
        return Policy(
            org_id=self.org_id,
            policy_id=self.policy_id,
            jurisdiction=self.jurisdiction,
            required_days_per_week=self.required_days_per_week,
            minimum_minutes_per_day=self.minimum_minutes_per_day,
            overtime_threshold_daily=self.overtime_threshold_daily,
            overtime_threshold_weekly=self.overtime_threshold_weekly,
            daily_double_time_minutes=self.daily_double_time_minutes,
            seventh_day_rule=self.seventh_day_rule,
            meal_break_required=self.meal_break_required,
            meal_break_after_minutes=self.meal_break_after_minutes,
            rest_break_interval=self.rest_break_interval,
            annual_pto_days=self.annual_pto_days,
            max_carryover_days=self.max_carryover_days,
            leave_year_start_month=self.leave_year_start_month,
            leave_year_start_day=self.leave_year_start_day,
            effective_date=self.effective_date,
            is_active=self.is_active,
        )


class LeaveAllowanceOverride(Base, TimestampMixin):
    """Per-employee PTO allowance. effective_year NULL means permanent."""

    __tablename__ = "leave_allowance_override"

    override_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    org_id: Mapped[UUID] = mapped_column(nullable=False)
    annual_pto_days: Mapped[int] = mapped_column(Integer, nullable=False)
    effective_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index("leave_override_user_org_idx", "user_id", "org_id"),
    )

    def to_domain(self) -> AllowanceOverrideRecord:
        return AllowanceOverrideRecord(
            user_id=self.user_id,
            org_id=self.org_id,
            annual_pto_days=self.annual_pto_days,
            effective_year=self.effective_year,
        )


class LeaveRequest(Base, TimestampMixin):
    """Single-day leave request."""

    __tablename__ = "leave_request"

    leave_request_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    org_id: Mapped[UUID] = mapped_column(nullable=False)
    leave_date: Mapped[date] = mapped_column(Date, nullable=False)
    leave_type: Mapped[str] = mapped_column(String, nullable=False, default=LeaveType.PTO.value)
    status: Mapped[str] = mapped_column(String, nullable=False, default=LeaveStatus.PENDING.value)

    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')",
            name="leave_request_status_check",
        ),
        Index("leave_request_user_date_idx", "user_id", "leave_date"),
    )

    def to_domain(self) -> LeaveRequestRecord:
        return LeaveRequestRecord(
            user_id=self.user_id,
            org_id=self.org_id,
            date=self.leave_date,
            leave_type=LeaveType(self.leave_type),
            status=LeaveStatus(self.status),
        )
