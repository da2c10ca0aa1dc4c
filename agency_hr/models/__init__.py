# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    team_member, leave_type, leave_policy, leave_balance, leave_request,
    attendance, slack
)

# Explicit class exports for cleaner imports
from .team_member import JobRole, TeamMember, RecordStatus
from .leave_type import LeaveType, LeaveCategory
from .leave_policy import LeavePolicy
from .leave_balance import LeaveBalance
from .leave_request import LeaveRequest, LeaveStatus
from .attendance import Attendance, AttendanceStatus
from .slack import SlackSettings, SlackAttendanceLog, SlackEventType, SlackOutcome

__all__ = [
    "JobRole",
    "TeamMember",
    "RecordStatus",
    "LeaveType",
    "LeaveCategory",
    "LeavePolicy",
    "LeaveBalance",
    "LeaveRequest",
    "LeaveStatus",
    "Attendance",
    "AttendanceStatus",
    "SlackSettings",
    "SlackAttendanceLog",
    "SlackEventType",
    "SlackOutcome",
]
