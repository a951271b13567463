"""User model.

One table for every role. Employee-only columns (department, position,
skills) and the client-only ``company_details`` are left empty for the other
roles; the API layer emits only the payload matching ``role``.
"""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    name: str = Field(nullable=False)
    email: str = Field(nullable=False, unique=True, index=True)  # stored lower-cased
    password_hash: str = Field(nullable=False)
    role: str = Field(nullable=False, index=True)  # ceo | employee | client
    access: str = Field(default="active", nullable=False)  # active | inactive
    contact: Optional[str] = None

    # employee
    department: Optional[str] = None
    position: Optional[str] = None
    skills: list = Field(default_factory=list, sa_type=JSONType, nullable=False)

    # client
    company_details: Optional[dict] = Field(default=None, sa_type=JSONType)
