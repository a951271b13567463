"""Project team membership (ordered, one row per employee)."""

import uuid

from sqlmodel import Field, SQLModel


class ProjectAssignment(SQLModel, table=True):
    __tablename__ = "project_assignments"

    project_id: uuid.UUID = Field(foreign_key="projects.id", ondelete="CASCADE", primary_key=True)
    employee_id: uuid.UUID = Field(foreign_key="users.id", ondelete="CASCADE", primary_key=True)
    role: str = Field(default="developer", nullable=False)  # lead | developer | designer | tester
    position: int = Field(default=0, nullable=False)
