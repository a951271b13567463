"""Directory schemas: employees, clients, the CEO and login."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from .common import Access, CamelModel, ProjectStatus

MAX_PASSWORD_BYTES = 72


class CompanyDetails(CamelModel):
    """Client company record. All three fields are mandatory."""
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    phone: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class UserCreateBase(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=1)
    contact: Optional[str] = None

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value: str) -> str:
        # bcrypt only hashes the first 72 bytes.
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
        return value


class EmployeeCreate(UserCreateBase):
    department: Optional[str] = None
    position: Optional[str] = None
    skills: List[str] = Field(default_factory=list)


class ClientCreate(UserCreateBase):
    company_details: CompanyDetails


class UserUpdateBase(CamelModel):
    """Partial update. Only fields present in the request are applied."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    access: Optional[Access] = None
    contact: Optional[str] = None


class EmployeeUpdate(UserUpdateBase):
    department: Optional[str] = None
    position: Optional[str] = None
    skills: Optional[List[str]] = None


class ClientUpdate(UserUpdateBase):
    company_details: Optional[CompanyDetails] = None


class ProfileUpdate(CamelModel):
    """Fields an employee may change on their own record."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    contact: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    skills: Optional[List[str]] = None


class LoginRequest(CamelModel):
    email: str
    password: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ProjectRef(CamelModel):
    """Short project reference used in profiles."""
    id: UUID
    name: str
    status: ProjectStatus


class UserReadBase(CamelModel):
    id: UUID
    name: str
    email: str
    access: Access
    contact: Optional[str] = None
    project_assignments: Optional[List[ProjectRef]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CeoRead(UserReadBase):
    role: Literal["ceo"] = "ceo"


class EmployeeRead(UserReadBase):
    role: Literal["employee"] = "employee"
    department: Optional[str] = None
    position: Optional[str] = None
    skills: List[str] = Field(default_factory=list)


class ClientRead(UserReadBase):
    role: Literal["client"] = "client"
    company_details: Optional[CompanyDetails] = None


# Role-tagged user record; only the payload of the matching role is present.
UserRead = Annotated[
    Union[CeoRead, EmployeeRead, ClientRead],
    Field(discriminator="role"),
]


class LoginResponse(CamelModel):
    token: str
    user: UserRead
