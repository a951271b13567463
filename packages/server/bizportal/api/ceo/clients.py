"""
Client administration (CEO only).

GET    /api/ceo/clients        — List clients
POST   /api/ceo/clients        — Create a client (company details required)
PUT    /api/ceo/clients/{id}   — Update fields / toggle access
DELETE /api/ceo/clients/{id}   — Delete a client
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bizportal.core.auth import Identity, require_ceo
from bizportal.core.database import get_session
from bizportal.services import users as user_service
from bizportal_shared.schemas.common import MessageResponse, Role
from bizportal_shared.schemas.users import ClientCreate, ClientRead, ClientUpdate

router = APIRouter()


@router.get("", response_model=List[ClientRead], response_model_exclude_none=True)
async def list_clients(
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.list_by_role(session, [Role.CLIENT])


@router.post("", response_model=ClientRead, status_code=201, response_model_exclude_none=True)
async def create_client(
    body: ClientCreate,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.create_user(session, Role.CLIENT, body)


@router.put("/{clientId}", response_model=ClientRead, response_model_exclude_none=True)
async def update_client(
    clientId: uuid.UUID,
    body: ClientUpdate,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.update_user(session, Role.CLIENT, clientId, body)


@router.delete("/{clientId}", response_model=MessageResponse)
async def delete_client(
    clientId: uuid.UUID,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    """Delete a client. Their projects remain, with no client attached."""
    await user_service.delete_user(session, Role.CLIENT, clientId)
    return MessageResponse(message="Client deleted successfully")
