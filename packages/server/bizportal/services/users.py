"""
Directory service: business logic for employees, clients and the CEO.

Handles:
- Role-filtered listing and role-shaped serialization (passwords never leave)
- Create with email uniqueness, partial update, hard delete with cleanup
- Login (access gate + password check) and token issue
- Self-service profile reads/updates
- CEO bootstrap at startup
"""

from __future__ import annotations

import uuid
from typing import Optional, Sequence, Union

import structlog
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from bizportal.core.auth import Identity, create_access_token, hash_password, verify_password
from bizportal.core.config import Settings
from bizportal.core.errors import Conflict, NotFound, Unauthorized
from bizportal.models.assignments import ProjectAssignment
from bizportal.models.base import utcnow
from bizportal.models.project import Project
from bizportal.models.timesheet import Timesheet
from bizportal.models.user import User
from bizportal.services import projects as project_service
from bizportal_shared.schemas.common import Access, Role
from bizportal_shared.schemas.users import (
    CeoRead,
    ClientCreate,
    ClientRead,
    ClientUpdate,
    EmployeeCreate,
    EmployeeRead,
    EmployeeUpdate,
    LoginResponse,
    ProfileUpdate,
    ProjectRef,
)

log = structlog.get_logger()

UserCreate = Union[EmployeeCreate, ClientCreate]
UserUpdate = Union[EmployeeUpdate, ClientUpdate]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def normalize_email(email: str) -> str:
    return email.strip().lower()


def serialize_user(
    user: User, project_refs: Optional[list[ProjectRef]] = None
) -> Union[CeoRead, EmployeeRead, ClientRead]:
    """Role-shaped view of a user. The password hash is never included."""
    base = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "access": user.access,
        "contact": user.contact,
        "project_assignments": project_refs,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
    if user.role == Role.EMPLOYEE.value:
        return EmployeeRead(
            **base,
            department=user.department,
            position=user.position,
            skills=list(user.skills or []),
        )
    if user.role == Role.CLIENT.value:
        return ClientRead(**base, company_details=user.company_details)
    return CeoRead(**base)


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def _ensure_email_available(
    session: AsyncSession, email: str, *, exclude_id: Optional[uuid.UUID] = None
) -> None:
    existing = await get_user_by_email(session, email)
    if existing and existing.id != exclude_id:
        raise Conflict("User already exists")


async def get_user_or_404(
    session: AsyncSession, user_id: uuid.UUID, role: Optional[Role] = None
) -> User:
    user = await session.get(User, user_id)
    if not user or (role is not None and user.role != role.value):
        label = role.value.capitalize() if role else "User"
        raise NotFound(f"{label} not found")
    return user


async def _flush_unique(session: AsyncSession) -> None:
    # The unique index on email backs up the explicit check under races.
    try:
        await session.flush()
    except IntegrityError:
        raise Conflict("User already exists")


# ---------------------------------------------------------------------------
# Directory operations
# ---------------------------------------------------------------------------


async def list_by_role(
    session: AsyncSession, roles: Sequence[Role]
) -> list[Union[CeoRead, EmployeeRead, ClientRead]]:
    """All users holding one of ``roles``, ordered by name."""
    result = await session.execute(
        select(User)
        .where(User.role.in_([r.value for r in roles]))
        .order_by(User.name, User.email)
    )
    return [serialize_user(u) for u in result.scalars().all()]


async def create_user(
    session: AsyncSession, role: Role, req: UserCreate
) -> Union[EmployeeRead, ClientRead]:
    """Create an employee or client. Duplicate email fails with 409."""
    email = normalize_email(req.email)
    await _ensure_email_available(session, email)

    user = User(
        name=req.name,
        email=email,
        password_hash=hash_password(req.password),
        role=role.value,
        access=Access.ACTIVE.value,
        contact=req.contact,
    )
    if isinstance(req, EmployeeCreate):
        user.department = req.department
        user.position = req.position
        user.skills = list(req.skills)
    elif isinstance(req, ClientCreate):
        user.company_details = req.company_details.model_dump()

    session.add(user)
    await _flush_unique(session)

    log.info("user.created", user_id=str(user.id), role=role.value)
    return serialize_user(user)


async def update_user(
    session: AsyncSession, role: Role, user_id: uuid.UUID, req: UserUpdate
) -> Union[EmployeeRead, ClientRead]:
    """Merge the fields present in ``req``. Never touches password or role."""
    user = await get_user_or_404(session, user_id, role)

    if req.email is not None:
        email = normalize_email(req.email)
        if email != user.email:
            await _ensure_email_available(session, email, exclude_id=user.id)
            user.email = email
    if req.name is not None:
        user.name = req.name
    if req.access is not None:
        user.access = req.access.value
    if req.contact is not None:
        user.contact = req.contact

    if isinstance(req, EmployeeUpdate):
        if req.department is not None:
            user.department = req.department
        if req.position is not None:
            user.position = req.position
        if req.skills is not None:
            user.skills = list(req.skills)
    elif isinstance(req, ClientUpdate):
        if req.company_details is not None:
            user.company_details = req.company_details.model_dump()

    user.updated_at = utcnow()
    session.add(user)
    await _flush_unique(session)

    log.info(
        "user.updated",
        user_id=str(user.id),
        role=role.value,
        fields=sorted(req.model_dump(exclude_none=True).keys()),
    )
    return serialize_user(user)


async def delete_user(session: AsyncSession, role: Role, user_id: uuid.UUID) -> None:
    """Hard delete.

    Project assignments and the user's own timesheets go with it; projects
    owned by a deleted client and timesheets naming a deleted manager keep
    their rows with the reference cleared.
    """
    user = await get_user_or_404(session, user_id, role)
    now = utcnow()

    result = await session.execute(
        select(ProjectAssignment.project_id).where(ProjectAssignment.employee_id == user.id)
    )
    touched = [row[0] for row in result.all()]
    if touched:
        await session.execute(
            update(Project).where(Project.id.in_(touched)).values(updated_at=now)
        )
    await session.execute(
        delete(ProjectAssignment).where(ProjectAssignment.employee_id == user.id)
    )
    await session.execute(delete(Timesheet).where(Timesheet.employee_id == user.id))
    await session.execute(
        update(Timesheet).where(Timesheet.manager_id == user.id).values(manager_id=None)
    )
    await session.execute(
        update(Project).where(Project.client_id == user.id).values(client_id=None, updated_at=now)
    )

    await session.delete(user)
    await session.flush()
    log.info("user.deleted", user_id=str(user_id), role=role.value)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


async def authenticate(session: AsyncSession, email: str, password: str) -> LoginResponse:
    """Verify credentials and issue a bearer token with a role-shaped profile."""
    user = await get_user_by_email(session, email)
    if not user:
        log.warning("auth.login_failure", email=email, reason="unknown_email")
        raise Unauthorized("Invalid credentials")

    if user.access == Access.INACTIVE.value:
        log.warning("auth.login_failure", user_id=str(user.id), reason="inactive")
        raise Unauthorized(
            "Your account has been deactivated. Please contact the administrator."
        )

    if not verify_password(password, user.password_hash):
        log.warning("auth.login_failure", user_id=str(user.id), reason="bad_password")
        raise Unauthorized("Invalid credentials")

    token = create_access_token(user.id, user.role, user.email)
    log.info("auth.login_success", user_id=str(user.id), role=user.role)
    return LoginResponse(token=token, user=serialize_user(user))


# ---------------------------------------------------------------------------
# Self-service
# ---------------------------------------------------------------------------


async def get_profile(
    session: AsyncSession, identity: Identity
) -> Union[CeoRead, EmployeeRead, ClientRead]:
    """The caller's own record with project references derived at read time."""
    user = await get_user_or_404(session, identity.id, identity.role)
    refs = await project_service.project_refs_for_user(session, user)
    return serialize_user(user, project_refs=refs)


async def update_own_profile(
    session: AsyncSession, identity: Identity, req: ProfileUpdate
) -> Union[CeoRead, EmployeeRead, ClientRead]:
    user = await get_user_or_404(session, identity.id, identity.role)

    if req.name is not None:
        user.name = req.name
    if req.contact is not None:
        user.contact = req.contact
    if req.department is not None:
        user.department = req.department
    if req.position is not None:
        user.position = req.position
    if req.skills is not None:
        user.skills = [s.strip() for s in req.skills if s.strip()]

    user.updated_at = utcnow()
    session.add(user)
    await session.flush()

    log.info("user.profile_updated", user_id=str(user.id))
    refs = await project_service.project_refs_for_user(session, user)
    return serialize_user(user, project_refs=refs)


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------


async def ensure_ceo(session: AsyncSession, settings: Settings) -> Optional[User]:
    """Create the CEO account if no CEO exists. Returns the new user, if any."""
    result = await session.execute(select(User).where(User.role == Role.CEO.value))
    if result.scalars().first():
        return None

    email = normalize_email(settings.ceo_email)
    if await get_user_by_email(session, email):
        raise RuntimeError(f"Cannot bootstrap CEO: {email} is taken by another user")

    ceo = User(
        name=settings.ceo_name,
        email=email,
        password_hash=hash_password(settings.ceo_password),
        role=Role.CEO.value,
        access=Access.ACTIVE.value,
    )
    session.add(ceo)
    await session.flush()
    log.info("user.ceo_initialized", user_id=str(ceo.id), email=email)
    return ceo
