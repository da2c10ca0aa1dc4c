"""
Team directory: job roles and the employees holding them.
The leave ledger resolves an employee's policies through ``role_title``.
"""
import enum

from sqlalchemy import Column, String, Date, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from agency_hr.database import Base, new_id


class RecordStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class JobRole(Base):
    __tablename__ = "job_roles"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String, unique=True, index=True, nullable=False)
    description = Column(String, nullable=True)
    status = Column(String, default=RecordStatus.ACTIVE.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    policies = relationship("LeavePolicy", back_populates="job_role", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<JobRole {self.title}>"


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    role_title = Column(String, index=True, nullable=True)
    joined_date = Column(Date, nullable=True)
    # External chat identity used by the Slack attendance bot
    slack_user_id = Column(String, unique=True, index=True, nullable=True)
    status = Column(String, default=RecordStatus.ACTIVE.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    leave_requests = relationship("LeaveRequest", back_populates="team_member", cascade="all, delete-orphan")
    leave_balances = relationship("LeaveBalance", back_populates="team_member", cascade="all, delete-orphan")
    attendance = relationship("Attendance", back_populates="team_member", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<TeamMember {self.email}>"
