"""
Authentication endpoints.

POST /api/auth/login — Universal login (CEO, employee, client)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bizportal.core.database import get_session
from bizportal.services import users as user_service
from bizportal_shared.schemas.users import LoginRequest, LoginResponse

router = APIRouter()


@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
):
    """Authenticate with email/password and receive a bearer token."""
    return await user_service.authenticate(session, body.email, body.password)
