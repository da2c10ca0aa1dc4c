"""
Slack integration state: the workspace connection and the audit trail of
attendance messages the bot has processed.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from agency_hr.database import Base, new_id
import enum


class SlackEventType(str, enum.Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


class SlackOutcome(str, enum.Enum):
    CHECKED_IN = "CHECKED_IN"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    NO_CHECK_IN = "NO_CHECK_IN"


class SlackSettings(Base):
    __tablename__ = "slack_settings"

    id = Column(String(32), primary_key=True, default=new_id)
    # Both secrets are stored Fernet-encrypted
    bot_token = Column(Text, nullable=True)
    signing_secret = Column(Text, nullable=True)
    check_in_channel_id = Column(String, nullable=True)
    check_in_keywords = Column(JSON, nullable=False, default=list)
    check_out_keywords = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, default=True, nullable=False)
    team_id = Column(String, nullable=True)
    team_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class SlackAttendanceLog(Base):
    __tablename__ = "slack_attendance_logs"

    id = Column(String(32), primary_key=True, default=new_id)
    team_member_id = Column(String(32), ForeignKey("team_members.id"), nullable=False, index=True)
    slack_user_id = Column(String, nullable=False)
    # Slack's message ts; a message is applied at most once
    slack_message_ts = Column(String, unique=True, index=True, nullable=False)
    channel_id = Column(String, nullable=True)
    message_text = Column(Text, nullable=True)
    event_type = Column(String, nullable=False, index=True)
    detected_keyword = Column(String, nullable=True)
    outcome = Column(String, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    attendance_id = Column(String(32), ForeignKey("attendance.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    team_member = relationship("TeamMember")

    @property
    def member_name(self):
        return self.team_member.name if self.team_member else None

    @property
    def member_email(self):
        return self.team_member.email if self.team_member else None
