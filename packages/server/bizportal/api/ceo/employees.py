"""
Employee administration (CEO only).

GET    /api/ceo/employees        — List employees
POST   /api/ceo/employees        — Create an employee
PUT    /api/ceo/employees/{id}   — Update fields / toggle access
DELETE /api/ceo/employees/{id}   — Delete an employee
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
from bizportal_shared.schemas.users import EmployeeCreate, EmployeeRead, EmployeeUpdate

router = APIRouter()


@router.get("", response_model=List[EmployeeRead], response_model_exclude_none=True)
async def list_employees(
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.list_by_role(session, [Role.EMPLOYEE])


@router.post("", response_model=EmployeeRead, status_code=201, response_model_exclude_none=True)
async def create_employee(
    body: EmployeeCreate,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.create_user(session, Role.EMPLOYEE, body)


@router.put("/{employeeId}", response_model=EmployeeRead, response_model_exclude_none=True)
async def update_employee(
    employeeId: uuid.UUID,
    body: EmployeeUpdate,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    """Merge provided fields. Setting ``access`` to inactive blocks login."""
    return await user_service.update_user(session, Role.EMPLOYEE, employeeId, body)


@router.delete("/{employeeId}", response_model=MessageResponse)
async def delete_employee(
    employeeId: uuid.UUID,
    identity: Identity = Depends(require_ceo),
    session: AsyncSession = Depends(get_session),
):
    await user_service.delete_user(session, Role.EMPLOYEE, employeeId)
    return MessageResponse(message="Employee deleted successfully")
