"""Timesheet model."""

from datetime import date
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin


class Timesheet(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "timesheets"

    employee_id: uuid.UUID = Field(foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True)
    project_id: uuid.UUID = Field(foreign_key="projects.id", ondelete="CASCADE", nullable=False, index=True)
    manager_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
    week: date = Field(nullable=False, sa_type=sa.Date, index=True)
    hours: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
    status: str = Field(default="submitted", nullable=False)  # submitted | inProgress | approved
