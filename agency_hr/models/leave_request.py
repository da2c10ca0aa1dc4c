from sqlalchemy import Column, String, Date, Float, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from agency_hr.database import Base, new_id
import enum

class LeaveStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"

class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(String(32), primary_key=True, default=new_id)
    team_member_id = Column(String(32), ForeignKey("team_members.id"), nullable=False, index=True)
    leave_type_id = Column(String(32), ForeignKey("leave_types.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    total_days = Column(Float, nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(String, default=LeaveStatus.PENDING.value, nullable=False, index=True)
    approved_by = Column(String, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    team_member = relationship("TeamMember", back_populates="leave_requests")
    leave_type = relationship("LeaveType")

    @property
    def member_name(self):
        return self.team_member.name if self.team_member else None

    @property
    def member_email(self):
        return self.team_member.email if self.team_member else None

    @property
    def leave_type_name(self):
        return self.leave_type.name if self.leave_type else None

    @property
    def leave_type_code(self):
        return self.leave_type.code if self.leave_type else None
