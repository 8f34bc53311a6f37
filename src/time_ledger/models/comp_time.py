"""Compensatory time ledger model."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from time_ledger.calculators.types import (
    CompTimeEntry as CompTimeRecord,
    CompTimeStatus,
    CompTimeType,
)
from time_ledger.models.base import Base, TimestampMixin, UTCDateTime


class CompTimeEntry(Base, TimestampMixin):
    """Comp time earned by a user. At most one entry per callout."""

    __tablename__ = "comp_time_entry"

    entry_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    org_id: Mapped[UUID] = mapped_column(nullable=False)
    entry_type: Mapped[str] = mapped_column(String, nullable=False, default=CompTimeType.MANUAL.value)
    source_date: Mapped[date] = mapped_column(Date, nullable=False)
    callout_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("callout.callout_id"),
        nullable=True,
        unique=True,
    )
    minutes_earned: Mapped[int] = mapped_column(Integer, nullable=False)
    minutes_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default=CompTimeStatus.AVAILABLE.value)
    description: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('AVAILABLE', 'PARTIALLY_USED', 'USED', 'EXPIRED')",
            name="comp_time_status_check",
        ),
        CheckConstraint(
            "entry_type IN ('CALLOUT', 'MANUAL')",
            name="comp_time_type_check",
        ),
        CheckConstraint("minutes_earned > 0", name="comp_time_earned_positive"),
        CheckConstraint(
            "minutes_used >= 0 AND minutes_used <= minutes_earned",
            name="comp_time_used_within_earned",
        ),
        Index("comp_time_user_source_idx", "user_id", "source_date"),
    )

    @classmethod
    def from_domain(cls, entry: CompTimeRecord) -> CompTimeEntry:
        return cls(
            user_id=entry.user_id,
            org_id=entry.org_id,
            entry_type=CompTimeType(entry.entry_type).value,
            source_date=entry.source_date,
            callout_id=entry.callout_id,
            minutes_earned=entry.minutes_earned,
            minutes_used=entry.minutes_used,
            expires_at=entry.expires_at,
            status=CompTimeStatus(entry.status).value,
            description=entry.description,
        )

    def to_domain(self) -> CompTimeRecord:
        return CompTimeRecord(
            entry_id=self.entry_id,
            user_id=self.user_id,
            org_id=self.org_id,
            source_date=self.source_date,
            minutes_earned=self.minutes_earned,
            minutes_used=self.minutes_used,
            expires_at=self.expires_at,
            status=CompTimeStatus(self.status),
            entry_type=CompTimeType(self.entry_type),
            callout_id=self.callout_id,
            description=self.description,
        )
