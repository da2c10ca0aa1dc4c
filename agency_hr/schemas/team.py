from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Optional

from agency_hr.models.team_member import RecordStatus


class JobRoleCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: RecordStatus = RecordStatus.ACTIVE

class JobRoleResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: RecordStatus

    model_config = ConfigDict(from_attributes=True)


class TeamMemberCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    role_title: Optional[str] = None
    joined_date: Optional[date] = None
    slack_user_id: Optional[str] = None

class TeamMemberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=3)
    role_title: Optional[str] = None
    joined_date: Optional[date] = None
    slack_user_id: Optional[str] = None
    status: Optional[RecordStatus] = None

class TeamMemberResponse(BaseModel):
    id: str
    name: str
    email: str
    role_title: Optional[str] = None
    joined_date: Optional[date] = None
    slack_user_id: Optional[str] = None
    status: RecordStatus

    model_config = ConfigDict(from_attributes=True)
