from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date, datetime
from typing import Optional

from agency_hr.models.leave_type import LeaveCategory
from agency_hr.models.leave_request import LeaveStatus


# --- Leave types ---

class LeaveTypeCreate(BaseModel):
    name: str = Field(min_length=1)
    code: str = Field(min_length=1, max_length=10)
    category: LeaveCategory = LeaveCategory.OTHER
    description: Optional[str] = None
    is_paid: bool = True
    is_active: bool = True

class LeaveTypeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    code: Optional[str] = Field(default=None, min_length=1, max_length=10)
    category: Optional[LeaveCategory] = None
    description: Optional[str] = None
    is_paid: Optional[bool] = None
    is_active: Optional[bool] = None

class LeaveTypeResponse(BaseModel):
    id: str
    name: str
    code: str
    category: str
    description: Optional[str] = None
    is_paid: bool
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


# --- Leave policies ---

class LeavePolicyCreate(BaseModel):
    job_role_id: str
    leave_type_id: str
    annual_quota: float = Field(ge=0)
    carry_forward_limit: float = Field(default=0, ge=0)
    is_active: bool = True

class LeavePolicyUpdate(BaseModel):
    annual_quota: Optional[float] = Field(default=None, ge=0)
    carry_forward_limit: Optional[float] = Field(default=None, ge=0)
    is_active: Optional[bool] = None

class LeavePolicyResponse(BaseModel):
    id: str
    job_role_id: str
    leave_type_id: str
    annual_quota: float
    carry_forward_limit: float
    is_active: bool
    job_role_title: Optional[str] = None
    leave_type_name: Optional[str] = None
    leave_type_code: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class PolicySeedResult(BaseModel):
    created: int
    skipped: int


# --- Leave requests ---

class LeaveRequestCreate(BaseModel):
    team_member_id: str
    leave_type_id: str
    start_date: date
    end_date: date
    total_days: float = Field(ge=0.5)
    reason: Optional[str] = None

    @model_validator(mode="after")
    def check_date_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self

class LeaveApproval(BaseModel):
    approved_by: str = Field(min_length=1)

class LeaveRejection(BaseModel):
    rejection_reason: str = Field(min_length=1)

class LeaveRequestResponse(BaseModel):
    id: str
    team_member_id: str
    leave_type_id: str
    start_date: date
    end_date: date
    total_days: float
    reason: Optional[str] = None
    status: LeaveStatus
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    member_name: Optional[str] = None
    member_email: Optional[str] = None
    leave_type_name: Optional[str] = None
    leave_type_code: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# --- Leave balances ---

class LeaveBalanceResponse(BaseModel):
    id: str
    team_member_id: str
    leave_type_id: str
    year: int
    total_quota: float
    used: float
    pending: float
    available: float
    carry_forward: float
    member_name: Optional[str] = None
    leave_type_name: Optional[str] = None
    leave_type_code: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class LeaveBalanceRecalculate(BaseModel):
    team_member_id: str
    leave_type_id: str
    year: int = Field(ge=1970)

class LeaveAvailability(BaseModel):
    available: bool
    balance: float
    pending: float
    used: float
    total_quota: float
    requested_days: float
    shortfall: float
    leave_type_name: Optional[str] = None
    message: str
