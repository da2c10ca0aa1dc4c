from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional

from agency_hr.models.slack import SlackEventType, SlackOutcome


class SlackSettingsCreate(BaseModel):
    bot_token: str = Field(min_length=1)
    signing_secret: str = Field(min_length=1)
    check_in_channel_id: Optional[str] = None
    check_in_keywords: Optional[List[str]] = None
    check_out_keywords: Optional[List[str]] = None
    is_active: bool = True

class SlackSettingsUpdate(BaseModel):
    bot_token: Optional[str] = None
    signing_secret: Optional[str] = None
    check_in_channel_id: Optional[str] = None
    check_in_keywords: Optional[List[str]] = None
    check_out_keywords: Optional[List[str]] = None
    is_active: Optional[bool] = None

class SlackSettingsResponse(BaseModel):
    """Secrets are returned masked, never in clear."""
    id: str
    bot_token: Optional[str] = None
    signing_secret: Optional[str] = None
    check_in_channel_id: Optional[str] = None
    check_in_keywords: List[str] = []
    check_out_keywords: List[str] = []
    is_active: bool
    team_id: Optional[str] = None
    team_name: Optional[str] = None

class SlackConnectionTest(BaseModel):
    bot_token: Optional[str] = None

class SlackConnectionResult(BaseModel):
    ok: bool
    team_name: Optional[str] = None
    team_id: Optional[str] = None
    error: Optional[str] = None

class SlackChannelResponse(BaseModel):
    id: str
    name: str

class SlackUserResponse(BaseModel):
    id: str
    name: str
    real_name: Optional[str] = None
    email: Optional[str] = None

class SlackAttendanceLogResponse(BaseModel):
    id: str
    team_member_id: str
    slack_user_id: str
    slack_message_ts: str
    channel_id: Optional[str] = None
    message_text: Optional[str] = None
    event_type: SlackEventType
    detected_keyword: Optional[str] = None
    outcome: SlackOutcome
    timestamp: datetime
    attendance_id: Optional[str] = None
    member_name: Optional[str] = None
    member_email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
