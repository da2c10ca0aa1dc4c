from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.sql import func
from agency_hr.database import Base, new_id
import enum

class LeaveCategory(str, enum.Enum):
    CASUAL = "CASUAL"
    SICK = "SICK"
    EARNED = "EARNED"
    MATERNITY = "MATERNITY"
    PATERNITY = "PATERNITY"
    UNPAID = "UNPAID"
    COMPENSATORY = "COMPENSATORY"
    OTHER = "OTHER"

class LeaveType(Base):
    __tablename__ = "leave_types"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    code = Column(String(10), unique=True, index=True, nullable=False)  # "CL", "SL", "EL"
    category = Column(String, nullable=False, default=LeaveCategory.OTHER.value)
    description = Column(Text, nullable=True)
    is_paid = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
