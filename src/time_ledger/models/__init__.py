"""ORM models."""

from time_ledger.models.base import Base, TimestampMixin, UTCDateTime
from time_ledger.models.comp_time import CompTimeEntry
from time_ledger.models.ledger import Callout, ClockEvent, Location, WorkDay
from time_ledger.models.policy import LeaveAllowanceOverride, LeaveRequest, PolicyConfig

__all__ = [
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "Callout",
    "CompTimeEntry",
    "ClockEvent",
    "Location",
    "WorkDay",
    "LeaveAllowanceOverride",
    "LeaveRequest",
    "PolicyConfig",
]
