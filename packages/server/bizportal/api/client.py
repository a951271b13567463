"""
Client self-service endpoints.

GET /api/client/profile   — Own profile with owned projects
GET /api/client/projects  — Projects where the caller is the client
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bizportal.core.auth import Identity, require_client
from bizportal.core.database import get_session
from bizportal.services import projects as project_service
from bizportal.services import users as user_service
from bizportal_shared.schemas.projects import ProjectRead
from bizportal_shared.schemas.users import ClientRead

router = APIRouter()


@router.get("/profile", response_model=ClientRead, response_model_exclude_none=True)
async def get_profile(
    identity: Identity = Depends(require_client),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.get_profile(session, identity)


@router.get("/projects", response_model=List[ProjectRead])
async def list_projects(
    identity: Identity = Depends(require_client),
    session: AsyncSession = Depends(get_session),
):
    return await project_service.projects_for_client(session, identity.id)
