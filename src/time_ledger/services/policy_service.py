"""Effective policy lookup against the policy store."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from time_ledger.calculators.policy_resolver import resolve_effective_policy
from time_ledger.calculators.types import Policy
from time_ledger.services.ledger_store import LedgerStore


class PolicyService:
    """Loads an org's active policies and runs the fallback chain over them."""

    def __init__(self, session: AsyncSession, store: LedgerStore | None = None):
        self.session = session
        self.store = store or LedgerStore(session)

    async def resolve_effective_policy(
        self,
        org_id: UUID,
        jurisdiction: str | None = None,
        as_of: date | None = None,
    ) -> Policy:
        """Resolve the policy in force. Always returns a policy."""
        policies = await self.store.list_active_policies(org_id)
        return resolve_effective_policy(policies, org_id, jurisdiction, as_of)
