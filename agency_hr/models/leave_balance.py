from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from agency_hr.database import Base, new_id

class LeaveBalance(Base):
    """
    Derived counters for one (team member, leave type, year).

    ``used`` and ``pending`` are never edited in place; they are re-derived
    from the leave requests of the year by the ledger service.
    Invariant: available == max(0, total_quota + carry_forward - used - pending)
    """
    __tablename__ = "leave_balances"
    __table_args__ = (
        UniqueConstraint("team_member_id", "leave_type_id", "year", name="uq_leave_balance_member_type_year"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    team_member_id = Column(String(32), ForeignKey("team_members.id"), nullable=False, index=True)
    leave_type_id = Column(String(32), ForeignKey("leave_types.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    total_quota = Column(Float, default=0.0, nullable=False)
    used = Column(Float, default=0.0, nullable=False)
    pending = Column(Float, default=0.0, nullable=False)
    available = Column(Float, default=0.0, nullable=False)
    carry_forward = Column(Float, default=0.0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    team_member = relationship("TeamMember", back_populates="leave_balances")
    leave_type = relationship("LeaveType")

    @property
    def member_name(self):
        return self.team_member.name if self.team_member else None

    @property
    def leave_type_name(self):
        return self.leave_type.name if self.leave_type else None

    @property
    def leave_type_code(self):
        return self.leave_type.code if self.leave_type else None
