"""
Project administration (CEO only).

GET    /api/ceo/projects         — List all projects, newest first
POST   /api/ceo/projects         — Create a project
GET    /api/ceo/projects/stats   — Counts by status and priority
GET    /api/ceo/projects/{id}    — Get one project
PUT    /api/ceo/projects/{id}    — Partial update (status is freely settable)
DELETE /api/ceo/projects/{id}    — Delete a project and its timesheets
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bizportal.core.auth import Identity, require_ceo
from bizportal.core.database import get_session
from bizportal.services import projects as project_service
from bizportal_shared.schemas.common import MessageResponse
from bizportal_shared.schemas.projects import (
    ProjectCreate,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
)

router = APIRouter()


@router.get("", response_model=List[ProjectRead])
async def list_projects(
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await project_service.list_projects(session)


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    body: ProjectCreate,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    """Create a project. It always starts as ongoing."""
    return await project_service.create_project(session, body)


# Declared before /{projectId} so "stats" is not parsed as an id.
@router.get("/stats", response_model=ProjectStats)
async def project_stats(
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await project_service.project_stats(session)


@router.get("/{projectId}", response_model=ProjectRead)
async def get_project(
    projectId: uuid.UUID,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await project_service.get_project(session, projectId)


@router.put("/{projectId}", response_model=ProjectRead)
async def update_project(
    projectId: uuid.UUID,
    body: ProjectUpdate,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await project_service.update_project(session, projectId, body)


@router.delete("/{projectId}", response_model=MessageResponse)
async def delete_project(
    projectId: uuid.UUID,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    await project_service.delete_project(session, projectId)
    return MessageResponse(message="Project deleted")
