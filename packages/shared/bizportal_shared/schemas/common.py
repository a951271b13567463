from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    CEO = "ceo"
    EMPLOYEE = "employee"
    CLIENT = "client"


class Access(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProjectStatus(str, Enum):
    ONGOING = "ongoing"
    HOLD = "hold"
    COMPLETED = "completed"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AssignmentRole(str, Enum):
    LEAD = "lead"
    DEVELOPER = "developer"
    DESIGNER = "designer"
    TESTER = "tester"


class MilestoneStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    DELAYED = "delayed"


class TimesheetStatus(str, Enum):
    SUBMITTED = "submitted"
    IN_PROGRESS = "inProgress"
    APPROVED = "approved"


# Legal targets for each timesheet status. Approved is terminal.
TIMESHEET_TRANSITIONS: dict[TimesheetStatus, frozenset[TimesheetStatus]] = {
    TimesheetStatus.SUBMITTED: frozenset(
        {TimesheetStatus.SUBMITTED, TimesheetStatus.IN_PROGRESS, TimesheetStatus.APPROVED}
    ),
    TimesheetStatus.IN_PROGRESS: frozenset(
        {TimesheetStatus.SUBMITTED, TimesheetStatus.APPROVED}
    ),
    TimesheetStatus.APPROVED: frozenset(),
}


class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    message: str
