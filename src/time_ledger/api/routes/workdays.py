"""Work day endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, status

from time_ledger.api.dependencies import DbSession, OrgId
from time_ledger.api.schemas import (
    BreakViolationResponse,
    DaySummaryResponse,
    ErrorResponse,
    RecomputeResponse,
)
from time_ledger.config import get_settings
from time_ledger.services.ledger_store import LedgerStore
from time_ledger.services.workday_service import WorkDayService

router = APIRouter(prefix="/workdays", tags=["workdays"])


@router.post(
    "/{user_id}/{work_date}/recompute",
    response_model=RecomputeResponse,
    responses={422: {"model": ErrorResponse}},
)
async def recompute_work_day(
    db: DbSession,
    org_id: OrgId,
    user_id: Annotated[UUID, Path()],
    work_date: Annotated[date, Path()],
    tz: Annotated[str | None, Query(alias="timezone")] = None,
    jurisdiction: str | None = None,
) -> RecomputeResponse:
    """Rebuild a user's work day from the event ledger and store it."""
    service = WorkDayService(db)
    summary = await service.recompute_day(
        user_id,
        org_id,
        work_date,
        tz or get_settings().default_timezone,
        jurisdiction=jurisdiction,
    )
    if summary is None:
        return RecomputeResponse(user_id=user_id, date=work_date, summary=None)

    violations = await service.break_violations(summary, org_id, jurisdiction)
    response = DaySummaryResponse.model_validate(summary)
    response.break_violations = [BreakViolationResponse.model_validate(v) for v in violations]
    return RecomputeResponse(user_id=user_id, date=work_date, summary=response)


@router.get(
    "/{user_id}/{work_date}",
    response_model=DaySummaryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_work_day(
    db: DbSession,
    org_id: OrgId,
    user_id: Annotated[UUID, Path()],
    work_date: Annotated[date, Path()],
) -> DaySummaryResponse:
    """Get the stored summary for a user's day."""
    summary = await LedgerStore(db).get_day_summary(user_id, work_date)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No work day for user {user_id} on {work_date}",
        )
    return DaySummaryResponse.model_validate(summary)
