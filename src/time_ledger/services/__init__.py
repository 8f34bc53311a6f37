"""Time ledger services."""

from time_ledger.services.comp_time_service import CompTimeService
from time_ledger.services.leave_service import LeaveBalanceService
from time_ledger.services.ledger_store import LedgerStore
from time_ledger.services.locking_service import RecomputeLocks
from time_ledger.services.policy_service import PolicyService
from time_ledger.services.timesheet_service import TimesheetService
from time_ledger.services.workday_service import WorkDayService

__all__ = [
    "CompTimeService",
    "LeaveBalanceService",
    "LedgerStore",
    "RecomputeLocks",
    "PolicyService",
    "TimesheetService",
    "WorkDayService",
]
