"""Overtime preview endpoint."""

from fastapi import APIRouter

from time_ledger.api.dependencies import DbSession, OrgId
from time_ledger.api.schemas import (
    ErrorResponse,
    OvertimePolicyResponse,
    OvertimePreviewRequest,
    OvertimeResponse,
)
from time_ledger.calculators.overtime import calculate_weekly_overtime
from time_ledger.calculators.policy_resolver import overtime_policy_for
from time_ledger.calculators.types import DayEntry
from time_ledger.services.policy_service import PolicyService

router = APIRouter(prefix="/overtime", tags=["overtime"])


@router.post(
    "/preview",
    response_model=OvertimeResponse,
    responses={422: {"model": ErrorResponse}},
)
async def preview_overtime(
    db: DbSession,
    org_id: OrgId,
    payload: OvertimePreviewRequest,
) -> OvertimeResponse:
    """Split a week of daily totals under the org's effective policy."""
    as_of = payload.days[0].date if payload.days else None
    policy = await PolicyService(db).resolve_effective_policy(org_id, payload.jurisdiction, as_of)
    overtime_policy = overtime_policy_for(policy)

    result = calculate_weekly_overtime(
        [DayEntry(date=d.date, total_minutes=d.total_minutes) for d in payload.days],
        overtime_policy,
    )
    response = OvertimeResponse.model_validate(result)
    response.policy = OvertimePolicyResponse.model_validate(overtime_policy)
    return response
