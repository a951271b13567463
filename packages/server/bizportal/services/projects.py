"""
Project service layer: projects, team assignments, timeline and stats.

Handles:
- Project CRUD, with the client reference validated on write
- Team normalization: unresolvable entries dropped, duplicates collapsed
- Enrichment with client and employee summaries for API responses
- Role-scoped views for the client and employee surfaces
- Status/priority aggregates
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from typing import Any, Iterable, Optional, Sequence

import structlog
from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from bizportal.core.errors import NotFound, ValidationError
from bizportal.models.assignments import ProjectAssignment
from bizportal.models.base import utcnow
from bizportal.models.project import Project
from bizportal.models.timesheet import Timesheet
from bizportal.models.user import User
from bizportal_shared.schemas.common import AssignmentRole, Priority, ProjectStatus, Role
from bizportal_shared.schemas.projects import (
    AssignmentInput,
    AssignmentRead,
    ClientSummary,
    EmployeeSummary,
    ProjectCreate,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
    Timeline,
)
from bizportal_shared.schemas.users import ProjectRef

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def get_project_or_404(session: AsyncSession, project_id: uuid.UUID) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise NotFound("Project not found")
    return project


async def _require_client(session: AsyncSession, client_id: uuid.UUID) -> User:
    client = await session.get(User, client_id)
    if not client or client.role != Role.CLIENT.value:
        raise ValidationError("clientId must reference an existing client")
    return client


def _employee_ref(value: Any) -> Optional[uuid.UUID]:
    """Extract an employee id from a raw id or an employee object."""
    if isinstance(value, dict):
        value = value.get("id") or value.get("_id")
    if value is None:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


async def _normalize_assignments(
    session: AsyncSession,
    entries: Iterable[AssignmentInput],
    employee_ids: Iterable[str] = (),
) -> list[tuple[uuid.UUID, str]]:
    """Resolve team entries to ``(employee_id, role)`` pairs.

    Entries whose id does not resolve to an employee are dropped. The first
    entry for an employee wins; later duplicates are ignored.
    """
    candidates: list[tuple[uuid.UUID, str]] = []
    for entry in entries:
        emp_id = _employee_ref(entry.employee)
        if emp_id is not None:
            candidates.append((emp_id, entry.role.value))
    for raw in employee_ids:
        emp_id = _employee_ref(raw)
        if emp_id is not None:
            candidates.append((emp_id, AssignmentRole.DEVELOPER.value))

    if not candidates:
        return []

    result = await session.execute(
        select(User.id).where(
            User.id.in_({emp_id for emp_id, _ in candidates}),
            User.role == Role.EMPLOYEE.value,
        )
    )
    known = {row[0] for row in result.all()}

    pairs: list[tuple[uuid.UUID, str]] = []
    seen: set[uuid.UUID] = set()
    for emp_id, role in candidates:
        if emp_id in known and emp_id not in seen:
            seen.add(emp_id)
            pairs.append((emp_id, role))
    return pairs


async def _replace_assignments(
    session: AsyncSession, project_id: uuid.UUID, pairs: Sequence[tuple[uuid.UUID, str]]
) -> None:
    await session.execute(
        delete(ProjectAssignment).where(ProjectAssignment.project_id == project_id)
    )
    for position, (emp_id, role) in enumerate(pairs):
        session.add(
            ProjectAssignment(
                project_id=project_id,
                employee_id=emp_id,
                role=role,
                position=position,
            )
        )
    await session.flush()


async def enrich_projects(
    session: AsyncSession, projects: Sequence[Project]
) -> list[ProjectRead]:
    """Convert Project rows to ProjectRead with client and team summaries."""
    if not projects:
        return []

    project_ids = [p.id for p in projects]
    result = await session.execute(
        select(ProjectAssignment)
        .where(ProjectAssignment.project_id.in_(project_ids))
        .order_by(ProjectAssignment.position)
    )
    assignments = result.scalars().all()

    user_ids = {a.employee_id for a in assignments}
    user_ids.update(p.client_id for p in projects if p.client_id)
    users: dict[uuid.UUID, User] = {}
    if user_ids:
        result = await session.execute(select(User).where(User.id.in_(user_ids)))
        users = {u.id: u for u in result.scalars().all()}

    teams: dict[uuid.UUID, list[AssignmentRead]] = defaultdict(list)
    for a in assignments:
        emp = users.get(a.employee_id)
        if emp is None:
            continue
        teams[a.project_id].append(
            AssignmentRead(
                employee=EmployeeSummary(
                    id=emp.id,
                    name=emp.name,
                    email=emp.email,
                    department=emp.department,
                    position=emp.position,
                ),
                role=a.role,
            )
        )

    results = []
    for p in projects:
        client = users.get(p.client_id) if p.client_id else None
        results.append(
            ProjectRead(
                id=p.id,
                name=p.name,
                description=p.description,
                client=ClientSummary(
                    id=client.id,
                    name=client.name,
                    email=client.email,
                    company_details=client.company_details,
                ) if client else None,
                assigned_employees=teams.get(p.id, []),
                timeline=Timeline(
                    start_date=p.start_date,
                    end_date=p.end_date,
                    milestones=p.milestones or [],
                ),
                status=p.status,
                budget=p.budget,
                priority=p.priority,
                created_at=p.created_at,
                updated_at=p.updated_at,
            )
        )
    return results


def _newest_first(stmt):
    return stmt.order_by(Project.created_at.desc(), Project.id)


# ---------------------------------------------------------------------------
# Project operations
# ---------------------------------------------------------------------------


async def list_projects(session: AsyncSession) -> list[ProjectRead]:
    """All projects, newest created first."""
    result = await session.execute(_newest_first(select(Project)))
    return await enrich_projects(session, list(result.scalars().all()))


async def get_project(session: AsyncSession, project_id: uuid.UUID) -> ProjectRead:
    project = await get_project_or_404(session, project_id)
    return (await enrich_projects(session, [project]))[0]


async def create_project(session: AsyncSession, req: ProjectCreate) -> ProjectRead:
    """Create a project. Status always starts as ongoing."""
    await _require_client(session, req.client_id)
    pairs = await _normalize_assignments(session, req.assigned_employees, req.employee_ids)

    project = Project(
        name=req.name,
        description=req.description,
        client_id=req.client_id,
        start_date=req.start_date,
        end_date=req.end_date,
        milestones=[m.model_dump(mode="json", by_alias=True) for m in req.milestones],
        status=ProjectStatus.ONGOING.value,
        budget=req.budget,
        priority=req.priority.value,
    )
    session.add(project)
    await session.flush()  # get project.id

    await _replace_assignments(session, project.id, pairs)

    log.info(
        "project.created",
        project_id=str(project.id),
        client_id=str(project.client_id),
        team_size=len(pairs),
    )
    return (await enrich_projects(session, [project]))[0]


async def update_project(
    session: AsyncSession, project_id: uuid.UUID, req: ProjectUpdate
) -> ProjectRead:
    """Field-by-field merge. Status may move between any two values."""
    project = await get_project_or_404(session, project_id)

    if req.name is not None:
        project.name = req.name
    if req.description is not None:
        project.description = req.description
    if req.client_id is not None:
        await _require_client(session, req.client_id)
        project.client_id = req.client_id
    if req.start_date is not None:
        project.start_date = req.start_date
    if req.end_date is not None:
        project.end_date = req.end_date
    if project.end_date < project.start_date:
        raise ValidationError("endDate cannot be before startDate")
    if req.timeline is not None and req.timeline.milestones is not None:
        project.milestones = [
            m.model_dump(mode="json", by_alias=True) for m in req.timeline.milestones
        ]
    if req.budget is not None:
        project.budget = req.budget
    if req.priority is not None:
        project.priority = req.priority.value

    old_status = project.status
    if req.status is not None:
        project.status = req.status.value

    if req.assigned_employees is not None or req.employee_ids is not None:
        pairs = await _normalize_assignments(
            session, req.assigned_employees or [], req.employee_ids or []
        )
        await _replace_assignments(session, project.id, pairs)

    project.updated_at = utcnow()
    session.add(project)
    await session.flush()

    if old_status != project.status:
        log.info(
            "project.status_changed",
            project_id=str(project.id),
            from_status=old_status,
            to_status=project.status,
        )
    log.info("project.updated", project_id=str(project.id))
    return (await enrich_projects(session, [project]))[0]


async def delete_project(session: AsyncSession, project_id: uuid.UUID) -> None:
    """Hard delete together with its assignments and timesheets."""
    project = await get_project_or_404(session, project_id)

    await session.execute(
        delete(ProjectAssignment).where(ProjectAssignment.project_id == project.id)
    )
    result = await session.execute(
        delete(Timesheet).where(Timesheet.project_id == project.id)
    )
    await session.delete(project)
    await session.flush()

    log.info(
        "project.deleted",
        project_id=str(project_id),
        timesheets_removed=result.rowcount,
    )


async def project_stats(session: AsyncSession) -> ProjectStats:
    """Counts by status and priority, computed fresh on every call."""
    total = (await session.execute(select(func.count()).select_from(Project))).scalar_one()

    result = await session.execute(
        select(Project.status, func.count()).group_by(Project.status)
    )
    by_status = {status: count for status, count in result.all()}

    result = await session.execute(
        select(Project.priority, func.count()).group_by(Project.priority)
    )
    by_priority = {p.value: 0 for p in Priority}
    by_priority.update({priority: count for priority, count in result.all()})

    return ProjectStats(
        total_projects=total,
        ongoing_projects=by_status.get(ProjectStatus.ONGOING.value, 0),
        completed_projects=by_status.get(ProjectStatus.COMPLETED.value, 0),
        hold_projects=by_status.get(ProjectStatus.HOLD.value, 0),
        by_priority=by_priority,
    )


# ---------------------------------------------------------------------------
# Role-scoped views
# ---------------------------------------------------------------------------


async def projects_for_client(session: AsyncSession, client_id: uuid.UUID) -> list[ProjectRead]:
    """Projects whose client is ``client_id``."""
    result = await session.execute(
        _newest_first(select(Project).where(Project.client_id == client_id))
    )
    return await enrich_projects(session, list(result.scalars().all()))


async def projects_for_employee(
    session: AsyncSession, employee_id: uuid.UUID
) -> list[ProjectRead]:
    """Projects whose team includes ``employee_id``."""
    result = await session.execute(
        _newest_first(
            select(Project)
            .join(ProjectAssignment, ProjectAssignment.project_id == Project.id)
            .where(ProjectAssignment.employee_id == employee_id)
        )
    )
    return await enrich_projects(session, list(result.scalars().all()))


async def project_refs_for_user(session: AsyncSession, user: User) -> list[ProjectRef]:
    """Short references to the projects a user works on or owns."""
    if user.role == Role.EMPLOYEE.value:
        stmt = (
            select(Project)
            .join(ProjectAssignment, ProjectAssignment.project_id == Project.id)
            .where(ProjectAssignment.employee_id == user.id)
        )
    elif user.role == Role.CLIENT.value:
        stmt = select(Project).where(Project.client_id == user.id)
    else:
        return []

    result = await session.execute(_newest_first(stmt))
    return [
        ProjectRef(id=p.id, name=p.name, status=p.status)
        for p in result.scalars().all()
    ]
