"""
Timesheet review (CEO only).

GET /api/ceo/timesheets              — All timesheets
PUT /api/ceo/timesheets/{id}/status  — Move to inProgress / approved
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bizportal.core.auth import Identity, require_ceo
from bizportal.core.database import get_session
from bizportal.services import timesheets as timesheet_service
from bizportal_shared.schemas.timesheets import TimesheetRead, TimesheetReview

router = APIRouter()


@router.get("", response_model=List[TimesheetRead])
async def list_timesheets(
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await timesheet_service.list_all_timesheets(session)


@router.put("/{timesheetId}/status", response_model=TimesheetRead)
async def review_timesheet(
    timesheetId: uuid.UUID,
    body: TimesheetReview,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    """Approved timesheets cannot change status again."""
    return await timesheet_service.review_timesheet(
        session, timesheetId, body.status, reviewer_id=identity.id
    )
