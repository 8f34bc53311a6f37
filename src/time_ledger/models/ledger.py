"""Clock event, location, callout and work day models."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from time_ledger.calculators.types import (
    Callout as CalloutRecord,
    DaySummary,
    EventType,
    LocationCategory,
    RawEvent,
)
from time_ledger.models.base import Base, TimestampMixin, UTCDateTime


class Location(Base, TimestampMixin):
    """Work location. HOME category counts as remote."""

    __tablename__ = "location"

    location_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    org_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    code: Mapped[str | None] = mapped_column(String, nullable=True)
    category: Mapped[str] = mapped_column(String, nullable=False, default=LocationCategory.OFFICE.value)

    __table_args__ = (
        CheckConstraint(
            "category IN ('OFFICE', 'CLIENT', 'HOME', 'OTHER')",
            name="location_category_check",
        ),
    )


class ClockEvent(Base, TimestampMixin):
    """Append-only raw clock/break event."""

    __tablename__ = "clock_event"

    event_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    org_id: Mapped[UUID] = mapped_column(nullable=False)
    event_type: Mapped[str] = mapped_column(String, nullable=False)
    timestamp_server: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    timestamp_client: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    location_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("location.location_id"),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint(
            "event_type IN ('CLOCK_IN', 'CLOCK_OUT', 'BREAK_START', 'BREAK_END')",
            name="clock_event_type_check",
        ),
        Index("clock_event_user_time_idx", "user_id", "timestamp_server"),
    )

    def to_domain(self) -> RawEvent:
        return RawEvent(
            event_id=self.event_id,
            user_id=self.user_id,
            event_type=EventType(self.event_type),
            server_timestamp=self.timestamp_server,
            client_timestamp=self.timestamp_client,
            location_id=self.location_id,
        )


class WorkDay(Base, TimestampMixin):
    """Persisted daily summary; one row per (user, local date)."""

    __tablename__ = "work_day"

    work_day_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    break_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    first_clock_in: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    last_clock_out: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    meets_policy: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    location_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("location.location_id"),
        nullable=True,
    )
    event_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "work_date", name="work_day_user_date_unique"),
        CheckConstraint("total_minutes >= 0", name="work_day_total_nonnegative"),
    )

    def to_domain(self) -> DaySummary:
        return DaySummary(
            user_id=self.user_id,
            date=self.work_date,
            total_minutes=self.total_minutes,
            break_minutes=self.break_minutes,
            first_clock_in=self.first_clock_in,
            last_clock_out=self.last_clock_out,
            meets_policy=self.meets_policy,
            location_id=self.location_id,
            event_count=self.event_count,
        )


class Callout(Base, TimestampMixin):
    """Incident callout worked by an employee."""

    __tablename__ = "callout"

    callout_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    org_id: Mapped[UUID] = mapped_column(nullable=False)
    time_received: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    time_started: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    time_ended: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    priority: Mapped[str] = mapped_column(String, nullable=False, default="NORMAL")
    location_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("location.location_id"),
        nullable=True,
    )

    def to_domain(self) -> CalloutRecord:
        return CalloutRecord(
            callout_id=self.callout_id,
            user_id=self.user_id,
            time_received=self.time_received,
            time_started=self.time_started,
            time_ended=self.time_ended,
            priority=self.priority,
            location_id=self.location_id,
        )
