from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from agency_hr.database import Base, new_id

class LeavePolicy(Base):
    """Annual entitlement of one leave type for everyone sharing a job role."""
    __tablename__ = "leave_policies"
    __table_args__ = (
        UniqueConstraint("job_role_id", "leave_type_id", name="uq_leave_policy_role_type"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    job_role_id = Column(String(32), ForeignKey("job_roles.id"), nullable=False, index=True)
    leave_type_id = Column(String(32), ForeignKey("leave_types.id"), nullable=False, index=True)
    annual_quota = Column(Float, nullable=False, default=0.0)
    carry_forward_limit = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    job_role = relationship("JobRole", back_populates="policies")
    leave_type = relationship("LeaveType")

    @property
    def job_role_title(self):
        return self.job_role.title if self.job_role else None

    @property
    def leave_type_name(self):
        return self.leave_type.name if self.leave_type else None

    @property
    def leave_type_code(self):
        return self.leave_type.code if self.leave_type else None
