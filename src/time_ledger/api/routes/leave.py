"""Leave balance endpoint."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from time_ledger.api.dependencies import DbSession, OrgId
from time_ledger.api.schemas import ErrorResponse, PtoBalanceResponse
from time_ledger.services.leave_service import LeaveBalanceService

router = APIRouter(prefix="/leave", tags=["leave"])


@router.get(
    "/{user_id}/balance",
    response_model=PtoBalanceResponse,
    responses={422: {"model": ErrorResponse}},
)
async def get_pto_balance(
    db: DbSession,
    org_id: OrgId,
    user_id: Annotated[UUID, Path()],
    reference_date: date | None = None,
    jurisdiction: str | None = None,
) -> PtoBalanceResponse:
    """Get a user's PTO balance as of a date (default today)."""
    balance = await LeaveBalanceService(db).calculate_pto_balance(
        user_id, org_id, reference_date, jurisdiction
    )
    return PtoBalanceResponse.model_validate(balance)
