from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from .common import TIMESHEET_TRANSITIONS, CamelModel, TimesheetStatus


class WeekHours(CamelModel):
    """Hours per weekday, each 0-24. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    monday: int = Field(default=0, ge=0, le=24)
    tuesday: int = Field(default=0, ge=0, le=24)
    wednesday: int = Field(default=0, ge=0, le=24)
    thursday: int = Field(default=0, ge=0, le=24)
    friday: int = Field(default=0, ge=0, le=24)
    saturday: int = Field(default=0, ge=0, le=24)
    sunday: int = Field(default=0, ge=0, le=24)

    @property
    def total(self) -> int:
        return sum(self.model_dump().values())


class TimesheetCreate(CamelModel):
    project_id: UUID
    week: date
    hours: WeekHours = Field(default_factory=WeekHours)
    manager_id: Optional[UUID] = None


class TimesheetUpdate(CamelModel):
    hours: WeekHours


class TimesheetReview(CamelModel):
    status: TimesheetStatus


class PersonRef(CamelModel):
    id: UUID
    name: str
    email: str


class TimesheetProjectRef(CamelModel):
    id: UUID
    name: str


class TimesheetRead(CamelModel):
    id: UUID
    employee: Optional[PersonRef] = None
    project: Optional[TimesheetProjectRef] = None
    manager: Optional[PersonRef] = None
    week: date
    hours: WeekHours
    status: TimesheetStatus
    created_at: datetime
    updated_at: datetime


def validate_timesheet_transition(
    current: TimesheetStatus, target: TimesheetStatus
) -> tuple[bool, str]:
    """Validate a timesheet status change.

    Rules:
    - submitted and inProgress may move back to submitted (re-edit).
    - submitted and inProgress may be approved; submitted may be picked up
      as inProgress.
    - approved is terminal.

    Returns (is_valid, error_message).
    """
    if current == TimesheetStatus.APPROVED:
        return False, "Cannot update approved timesheet"
    if target in TIMESHEET_TRANSITIONS[current]:
        return True, ""
    if current == target:
        return False, f"Timesheet is already {current.value}"
    return False, f"Cannot transition timesheet from {current.value} to {target.value}"
