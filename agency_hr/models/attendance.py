from sqlalchemy import Column, String, Date, Float, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from agency_hr.database import Base, new_id
import enum

class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    HALF_DAY = "HALF_DAY"
    LATE = "LATE"
    ON_LEAVE = "ON_LEAVE"
    HOLIDAY = "HOLIDAY"
    WEEKEND = "WEEKEND"

class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("team_member_id", "date", name="uq_attendance_member_date"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    team_member_id = Column(String(32), ForeignKey("team_members.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    check_in = Column(String(5), nullable=True)  # "HH:MM"
    check_out = Column(String(5), nullable=True)
    status = Column(String, default=AttendanceStatus.PRESENT.value, nullable=False)
    working_hours = Column(Float, default=0.0, nullable=False)
    overtime_hours = Column(Float, default=0.0, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    team_member = relationship("TeamMember", back_populates="attendance")

    @property
    def member_name(self):
        return self.team_member.name if self.team_member else None

    @property
    def member_email(self):
        return self.team_member.email if self.team_member else None
