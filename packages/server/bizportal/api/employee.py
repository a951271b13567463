"""
Employee self-service endpoints. Every query is scoped to the caller.

GET  /api/employee/profile          — Own profile with assigned projects
PUT  /api/employee/profile          — Update own profile fields
GET  /api/employee/projects         — Projects the caller is assigned to
POST /api/employee/timesheet        — Submit a timesheet
GET  /api/employee/timesheets       — Own timesheets, newest week first
PUT  /api/employee/timesheet/{id}   — Re-edit hours (not once approved)
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bizportal.core.auth import Identity, require_employee
from bizportal.core.database import get_session
from bizportal.services import projects as project_service
from bizportal.services import timesheets as timesheet_service
from bizportal.services import users as user_service
from bizportal_shared.schemas.projects import ProjectRead
from bizportal_shared.schemas.timesheets import TimesheetCreate, TimesheetRead, TimesheetUpdate
from bizportal_shared.schemas.users import EmployeeRead, ProfileUpdate

router = APIRouter()


@router.get("/profile", response_model=EmployeeRead, response_model_exclude_none=True)
async def get_profile(
    identity: Identity = Depends(require_employee),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.get_profile(session, identity)


@router.put("/profile", response_model=EmployeeRead, response_model_exclude_none=True)
async def update_profile(
    body: ProfileUpdate,
    identity: Identity = Depends(require_employee),
    session: AsyncSession = Depends(get_session),
):
    """Update name, contact, department, position or skills."""
    return await user_service.update_own_profile(session, identity, body)


@router.get("/projects", response_model=List[ProjectRead])
async def list_projects(
    identity: Identity = Depends(require_employee),
    session: AsyncSession = Depends(get_session),
):
    return await project_service.projects_for_employee(session, identity.id)


@router.post("/timesheet", response_model=TimesheetRead, status_code=201)
async def submit_timesheet(
    body: TimesheetCreate,
    identity: Identity = Depends(require_employee),
    session: AsyncSession = Depends(get_session),
):
    return await timesheet_service.submit_timesheet(session, identity.id, body)


@router.get("/timesheets", response_model=List[TimesheetRead])
async def list_timesheets(
    identity: Identity = Depends(require_employee),
    session: AsyncSession = Depends(get_session),
):
    return await timesheet_service.list_for_employee(session, identity.id)


@router.put("/timesheet/{timesheetId}", response_model=TimesheetRead)
async def update_timesheet(
    timesheetId: uuid.UUID,
    body: TimesheetUpdate,
    identity: Identity = Depends(require_employee),
    session: AsyncSession = Depends(get_session),
):
    """Replace the hours of an own timesheet; status goes back to submitted."""
    return await timesheet_service.update_timesheet(
        session, timesheetId, identity.id, body.hours
    )
