# Every table model is imported here so create_all sees it.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .user import User  # noqa: F401
from .project import Project  # noqa: F401
from .assignments import ProjectAssignment  # noqa: F401
from .timesheet import Timesheet  # noqa: F401
