"""Project model."""

from datetime import date
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin


class Project(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "projects"

    name: str = Field(nullable=False)
    description: Optional[str] = None
    client_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="users.id", ondelete="SET NULL", index=True
    )
    start_date: date = Field(nullable=False, sa_type=sa.Date)
    end_date: date = Field(nullable=False, sa_type=sa.Date)
    milestones: list = Field(default_factory=list, sa_type=JSONType, nullable=False)
    status: str = Field(default="ongoing", nullable=False, index=True)  # ongoing | hold | completed
    budget: float = Field(default=0, nullable=False)
    priority: str = Field(default="medium", nullable=False)  # low | medium | high
