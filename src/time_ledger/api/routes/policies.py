"""Policy and jurisdiction endpoints."""

from datetime import date

from fastapi import APIRouter

from time_ledger.api.dependencies import DbSession, OrgId
from time_ledger.api.schemas import (
    JurisdictionListResponse,
    JurisdictionResponse,
    OvertimePolicyResponse,
    PolicyResponse,
)
from time_ledger.calculators.jurisdictions import JURISDICTION_TABLE_VERSION, list_jurisdictions
from time_ledger.calculators.policy_resolver import overtime_policy_for
from time_ledger.services.policy_service import PolicyService

router = APIRouter(tags=["policies"])


@router.get("/policies/effective", response_model=PolicyResponse)
async def get_effective_policy(
    db: DbSession,
    org_id: OrgId,
    jurisdiction: str | None = None,
    as_of: date | None = None,
) -> PolicyResponse:
    """Get the policy in force for the org, falling back to the system default."""
    policy = await PolicyService(db).resolve_effective_policy(org_id, jurisdiction, as_of)
    response = PolicyResponse.model_validate(policy)
    response.overtime_policy = OvertimePolicyResponse.model_validate(overtime_policy_for(policy))
    return response


@router.get("/jurisdictions", response_model=JurisdictionListResponse)
async def get_jurisdictions() -> JurisdictionListResponse:
    """List the known jurisdiction bundles."""
    return JurisdictionListResponse(
        version=JURISDICTION_TABLE_VERSION,
        items=[JurisdictionResponse.model_validate(j) for j in list_jurisdictions()],
    )
