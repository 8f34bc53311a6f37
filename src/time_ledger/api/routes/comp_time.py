"""Comp time endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, Response, status

from time_ledger.api.dependencies import DbSession, OrgId
from time_ledger.api.schemas import (
    CompTimeBalanceResponse,
    CompTimeEntryResponse,
    CompTimeGrantRequest,
    CompTimeResponse,
    ErrorResponse,
)
from time_ledger.calculators.comp_time import EXPIRING_SOON_DAYS, effective_status
from time_ledger.services.comp_time_service import CompTimeService
from time_ledger.services.ledger_store import LedgerStore

router = APIRouter(prefix="/comp-time", tags=["comp-time"])


@router.get(
    "/{user_id}",
    response_model=CompTimeResponse,
    responses={422: {"model": ErrorResponse}},
)
async def get_comp_time(
    db: DbSession,
    org_id: OrgId,
    user_id: Annotated[UUID, Path()],
    as_of: datetime | None = None,
    expiring_within_days: Annotated[int, Query(ge=0)] = EXPIRING_SOON_DAYS,
) -> CompTimeResponse:
    """Get a user's comp time entries and balance."""
    entries, balance = await CompTimeService(db).get_balance(
        user_id, org_id, as_of, expiring_within_days
    )

    items = []
    for entry in entries:
        item = CompTimeEntryResponse.model_validate(entry)
        item.status = effective_status(entry, balance.as_of)
        items.append(item)

    return CompTimeResponse(
        entries=items,
        balance=CompTimeBalanceResponse.model_validate(balance),
    )


@router.post(
    "/{user_id}",
    response_model=CompTimeEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def grant_comp_time(
    db: DbSession,
    org_id: OrgId,
    user_id: Annotated[UUID, Path()],
    request: CompTimeGrantRequest,
) -> CompTimeEntryResponse:
    """Manually grant comp time to a user."""
    entry = await CompTimeService(db).grant(
        user_id,
        org_id,
        request.minutes_earned,
        source_date=request.source_date,
        description=request.description,
    )
    return CompTimeEntryResponse.model_validate(entry)


@router.post(
    "/callouts/{callout_id}/accrue",
    response_model=CompTimeEntryResponse,
    responses={
        204: {"description": "Callout has no worked minutes yet"},
        404: {"model": ErrorResponse},
    },
)
async def accrue_callout_comp_time(
    db: DbSession,
    org_id: OrgId,
    callout_id: Annotated[UUID, Path()],
    tz: Annotated[str | None, Query(alias="timezone")] = None,
) -> CompTimeEntryResponse | Response:
    """Record the comp time earned by working a callout."""
    callout = await LedgerStore(db).get_callout(callout_id)
    if callout is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Callout {callout_id} not found",
        )

    entry = await CompTimeService(db).accrue_callout(callout, org_id, tz)
    if entry is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return CompTimeEntryResponse.model_validate(entry)
