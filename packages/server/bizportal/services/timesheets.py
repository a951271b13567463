"""
Timesheet service layer.

Employees submit weekly hours against a project and may re-edit them until
the timesheet is approved. Status changes beyond re-submission go through
``review_timesheet`` and the shared transition table.
"""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from bizportal.core.errors import InvalidState, NotFound
from bizportal.models.base import utcnow
from bizportal.models.project import Project
from bizportal.models.timesheet import Timesheet
from bizportal.models.user import User
from bizportal.services.projects import get_project_or_404
from bizportal.services.users import get_user_or_404
from bizportal_shared.schemas.common import Role, TimesheetStatus
from bizportal_shared.schemas.timesheets import (
    PersonRef,
    TimesheetCreate,
    TimesheetProjectRef,
    TimesheetRead,
    WeekHours,
    validate_timesheet_transition,
)

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _get_owned_timesheet_or_404(
    session: AsyncSession, timesheet_id: uuid.UUID, employee_id: uuid.UUID
) -> Timesheet:
    # A timesheet owned by someone else is indistinguishable from a missing one.
    result = await session.execute(
        select(Timesheet).where(
            Timesheet.id == timesheet_id,
            Timesheet.employee_id == employee_id,
        )
    )
    timesheet = result.scalar_one_or_none()
    if not timesheet:
        raise NotFound("Timesheet not found")
    return timesheet


def _person(user: Optional[User]) -> Optional[PersonRef]:
    if user is None:
        return None
    return PersonRef(id=user.id, name=user.name, email=user.email)


async def enrich_timesheets(
    session: AsyncSession, timesheets: Sequence[Timesheet]
) -> list[TimesheetRead]:
    """Resolve employee, project and manager references in one pass each."""
    if not timesheets:
        return []

    user_ids = {t.employee_id for t in timesheets}
    user_ids.update(t.manager_id for t in timesheets if t.manager_id)
    result = await session.execute(select(User).where(User.id.in_(user_ids)))
    users = {u.id: u for u in result.scalars().all()}

    result = await session.execute(
        select(Project.id, Project.name).where(
            Project.id.in_({t.project_id for t in timesheets})
        )
    )
    projects = {pid: name for pid, name in result.all()}

    return [
        TimesheetRead(
            id=t.id,
            employee=_person(users.get(t.employee_id)),
            project=TimesheetProjectRef(id=t.project_id, name=projects[t.project_id])
            if t.project_id in projects else None,
            manager=_person(users.get(t.manager_id)) if t.manager_id else None,
            week=t.week,
            hours=WeekHours(**(t.hours or {})),
            status=t.status,
            created_at=t.created_at,
            updated_at=t.updated_at,
        )
        for t in timesheets
    ]


# ---------------------------------------------------------------------------
# Employee operations
# ---------------------------------------------------------------------------


async def submit_timesheet(
    session: AsyncSession, employee_id: uuid.UUID, req: TimesheetCreate
) -> TimesheetRead:
    """Record a new timesheet as submitted.

    Several timesheets for the same employee, project and week are allowed;
    each submission is its own record.
    """
    # Tokens outlive deleted accounts; the owner must still exist.
    await get_user_or_404(session, employee_id, Role.EMPLOYEE)
    await get_project_or_404(session, req.project_id)
    if req.manager_id is not None and not await session.get(User, req.manager_id):
        raise NotFound("Manager not found")

    timesheet = Timesheet(
        employee_id=employee_id,
        project_id=req.project_id,
        manager_id=req.manager_id,
        week=req.week,
        hours=req.hours.model_dump(),
        status=TimesheetStatus.SUBMITTED.value,
    )
    session.add(timesheet)
    await session.flush()

    log.info(
        "timesheet.submitted",
        timesheet_id=str(timesheet.id),
        employee_id=str(employee_id),
        project_id=str(req.project_id),
        week=req.week.isoformat(),
        total_hours=req.hours.total,
    )
    return (await enrich_timesheets(session, [timesheet]))[0]


async def list_for_employee(
    session: AsyncSession, employee_id: uuid.UUID
) -> list[TimesheetRead]:
    """The employee's own timesheets, newest week first."""
    result = await session.execute(
        select(Timesheet)
        .where(Timesheet.employee_id == employee_id)
        .order_by(Timesheet.week.desc(), Timesheet.created_at.desc())
    )
    return await enrich_timesheets(session, list(result.scalars().all()))


async def update_timesheet(
    session: AsyncSession,
    timesheet_id: uuid.UUID,
    employee_id: uuid.UUID,
    hours: WeekHours,
) -> TimesheetRead:
    """Replace hours and put the timesheet back to submitted."""
    timesheet = await _get_owned_timesheet_or_404(session, timesheet_id, employee_id)

    valid, message = validate_timesheet_transition(
        TimesheetStatus(timesheet.status), TimesheetStatus.SUBMITTED
    )
    if not valid:
        log.info(
            "timesheet.update_rejected",
            timesheet_id=str(timesheet.id),
            status=timesheet.status,
        )
        raise InvalidState(message)

    timesheet.hours = hours.model_dump()
    timesheet.status = TimesheetStatus.SUBMITTED.value
    timesheet.updated_at = utcnow()
    session.add(timesheet)
    await session.flush()

    log.info("timesheet.updated", timesheet_id=str(timesheet.id), total_hours=hours.total)
    return (await enrich_timesheets(session, [timesheet]))[0]


# ---------------------------------------------------------------------------
# Reviewer operations
# ---------------------------------------------------------------------------


async def list_all_timesheets(session: AsyncSession) -> list[TimesheetRead]:
    result = await session.execute(
        select(Timesheet).order_by(Timesheet.week.desc(), Timesheet.created_at.desc())
    )
    return await enrich_timesheets(session, list(result.scalars().all()))


async def review_timesheet(
    session: AsyncSession,
    timesheet_id: uuid.UUID,
    target: TimesheetStatus,
    reviewer_id: uuid.UUID,
) -> TimesheetRead:
    """Move a timesheet along the review path (inProgress, approved)."""
    timesheet = await session.get(Timesheet, timesheet_id)
    if not timesheet:
        raise NotFound("Timesheet not found")

    current = TimesheetStatus(timesheet.status)
    valid, message = validate_timesheet_transition(current, target)
    if not valid:
        raise InvalidState(message)

    timesheet.status = target.value
    if timesheet.manager_id is None:
        timesheet.manager_id = reviewer_id
    timesheet.updated_at = utcnow()
    session.add(timesheet)
    await session.flush()

    log.info(
        "timesheet.reviewed",
        timesheet_id=str(timesheet.id),
        reviewer_id=str(reviewer_id),
        from_status=current.value,
        to_status=target.value,
    )
    return (await enrich_timesheets(session, [timesheet]))[0]
