"""Payroll timesheet endpoint."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query

from time_ledger.api.dependencies import DbSession, OrgId
from time_ledger.api.schemas import ErrorResponse, TimesheetResponse
from time_ledger.services.timesheet_service import TimesheetService

router = APIRouter(prefix="/timesheets", tags=["timesheets"])


@router.get(
    "/{user_id}",
    response_model=TimesheetResponse,
    responses={422: {"model": ErrorResponse}},
)
async def get_timesheet(
    db: DbSession,
    org_id: OrgId,
    user_id: Annotated[UUID, Path()],
    period: Annotated[str, Query(description="YYYY-MM or YYYY-Www")],
    tz: Annotated[str | None, Query(alias="timezone")] = None,
) -> TimesheetResponse:
    """Generate a payroll timesheet for a month or ISO week."""
    timesheet = await TimesheetService(db).generate_timesheet(user_id, period, tz)
    return TimesheetResponse.model_validate(timesheet)
