import re
import datetime as dt
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from agency_hr.models.attendance import AttendanceStatus

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def check_hhmm(value: Optional[str]) -> Optional[str]:
    if value is not None and not _HHMM.match(value):
        raise ValueError("time must be in HH:MM 24-hour format")
    return value


class AttendanceCreate(BaseModel):
    team_member_id: str
    date: dt.date
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    working_hours: Optional[float] = Field(default=None, ge=0)
    overtime_hours: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator("check_in", "check_out")
    @classmethod
    def validate_times(cls, value):
        return check_hhmm(value)

class AttendanceBulkCreate(BaseModel):
    records: List[AttendanceCreate] = Field(min_length=1)

class AttendanceUpdate(BaseModel):
    date: Optional[dt.date] = None
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    working_hours: Optional[float] = Field(default=None, ge=0)
    overtime_hours: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator("check_in", "check_out")
    @classmethod
    def validate_times(cls, value):
        return check_hhmm(value)

    @field_validator("date", "status", "working_hours", "overtime_hours")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class AttendanceResponse(BaseModel):
    id: str
    team_member_id: str
    date: dt.date
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    status: AttendanceStatus
    working_hours: float
    overtime_hours: float
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    member_name: Optional[str] = None
    member_email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class WorkingHoursRequest(BaseModel):
    check_in: str
    check_out: str

class WorkingHoursResponse(BaseModel):
    working_hours: float
    overtime_hours: float
