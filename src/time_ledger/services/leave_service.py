"""PTO balance service."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from time_ledger.calculators.dates import today_in
from time_ledger.calculators.leave_balance import compute_balance, leave_year_window
from time_ledger.calculators.types import LeaveType, PtoBalance
from time_ledger.config import get_settings
from time_ledger.services.ledger_store import LedgerStore
from time_ledger.services.policy_service import PolicyService


class LeaveBalanceService:
    """Computes point-in-time PTO balances from committed leave data.

    Balances are snapshots for a reference date and are never cached: the
    leave-year window moves with the reference date.
    """

    def __init__(self, session: AsyncSession, store: LedgerStore | None = None):
        self.session = session
        self.store = store or LedgerStore(session)
        self.policy_service = PolicyService(session, self.store)
        self.settings = get_settings()

    async def calculate_pto_balance(
        self,
        user_id: UUID,
        org_id: UUID,
        reference_date: date | None = None,
        jurisdiction: str | None = None,
    ) -> PtoBalance:
        """Calculate a user's PTO balance as of reference_date (default today)."""
        reference_date = reference_date or today_in(self.settings.default_timezone)
        policy = await self.policy_service.resolve_effective_policy(
            org_id, jurisdiction, reference_date
        )
        window = leave_year_window(
            reference_date, policy.leave_year_start_month, policy.leave_year_start_day
        )
        overrides = await self.store.list_overrides(user_id, org_id)

        taken = await self.store.count_approved_leave(
            user_id, LeaveType.PTO, window.start, window.end
        )
        prior_taken = 0
        if policy.max_carryover_days > 0:
            prior_taken = await self.store.count_approved_leave(
                user_id, LeaveType.PTO, window.prior_start, window.prior_end
            )

        return compute_balance(window, policy, overrides, user_id, org_id, taken, prior_taken)
