from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field, model_validator

from .common import AssignmentRole, CamelModel, MilestoneStatus, Priority, ProjectStatus
from .users import CompanyDetails


class Milestone(CamelModel):
    name: str = Field(min_length=1)
    due_date: Optional[date] = None
    status: MilestoneStatus = MilestoneStatus.PENDING


class Timeline(CamelModel):
    start_date: date
    end_date: date
    milestones: List[Milestone] = Field(default_factory=list)


class TimelineInput(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    milestones: Optional[List[Milestone]] = None


class AssignmentInput(CamelModel):
    """One team entry. ``employee`` is an id, or an employee object carrying one."""
    employee: Any = None
    role: AssignmentRole = AssignmentRole.DEVELOPER


def _check_dates(start: Optional[date], end: Optional[date]) -> None:
    if start and end and end < start:
        raise ValueError("endDate cannot be before startDate")


class ProjectCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    client_id: UUID
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    timeline: Optional[TimelineInput] = None
    budget: float = Field(ge=0)
    priority: Priority = Priority.MEDIUM
    assigned_employees: List[AssignmentInput] = Field(default_factory=list)
    employee_ids: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _resolve_timeline(self) -> "ProjectCreate":
        # Accept dates either at top level or nested in ``timeline``.
        if self.timeline is not None:
            self.start_date = self.start_date or self.timeline.start_date
            self.end_date = self.end_date or self.timeline.end_date
        if self.start_date is None:
            raise ValueError("startDate is required")
        if self.end_date is None:
            raise ValueError("endDate is required")
        _check_dates(self.start_date, self.end_date)
        return self

    @property
    def milestones(self) -> List[Milestone]:
        if self.timeline is not None and self.timeline.milestones:
            return self.timeline.milestones
        return []


class ProjectUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    client_id: Optional[UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    timeline: Optional[TimelineInput] = None
    status: Optional[ProjectStatus] = None
    budget: Optional[float] = Field(default=None, ge=0)
    priority: Optional[Priority] = None
    assigned_employees: Optional[List[AssignmentInput]] = None
    employee_ids: Optional[List[str]] = None

    @model_validator(mode="after")
    def _merge_timeline(self) -> "ProjectUpdate":
        if self.timeline is not None:
            self.start_date = self.start_date or self.timeline.start_date
            self.end_date = self.end_date or self.timeline.end_date
        _check_dates(self.start_date, self.end_date)
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ClientSummary(CamelModel):
    id: UUID
    name: str
    email: str
    company_details: Optional[CompanyDetails] = None


class EmployeeSummary(CamelModel):
    id: UUID
    name: str
    email: str
    department: Optional[str] = None
    position: Optional[str] = None


class AssignmentRead(CamelModel):
    employee: EmployeeSummary
    role: AssignmentRole


class ProjectRead(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    client: Optional[ClientSummary] = None
    assigned_employees: List[AssignmentRead] = Field(default_factory=list)
    timeline: Timeline
    status: ProjectStatus
    budget: float
    priority: Priority
    created_at: datetime
    updated_at: datetime


class ProjectStats(CamelModel):
    total_projects: int = 0
    ongoing_projects: int = 0
    completed_projects: int = 0
    hold_projects: int = 0
    by_priority: Dict[str, int] = Field(default_factory=dict)
