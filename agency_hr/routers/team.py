from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agency_hr.database import get_db
from agency_hr.models.team_member import RecordStatus
from agency_hr.schemas.team import (
    JobRoleCreate,
    JobRoleResponse,
    TeamMemberCreate,
    TeamMemberResponse,
    TeamMemberUpdate,
)
from agency_hr.services.leave_balance import LeaveBalanceService
from agency_hr.services.team_directory import TeamDirectoryService

router = APIRouter()


@router.get("/job-roles", response_model=List[JobRoleResponse])
def list_job_roles(status: Optional[RecordStatus] = None, db: Session = Depends(get_db)):
    return TeamDirectoryService(db).list_job_roles(status=status.value if status else None)


@router.post("/job-roles", response_model=JobRoleResponse, status_code=201)
def create_job_role(data: JobRoleCreate, db: Session = Depends(get_db)):
    return TeamDirectoryService(db).create_job_role(data)


@router.get("/team-members", response_model=List[TeamMemberResponse])
def list_team_members(status: Optional[RecordStatus] = None, db: Session = Depends(get_db)):
    return TeamDirectoryService(db).list_members(status=status.value if status else None)


@router.post("/team-members", response_model=TeamMemberResponse, status_code=201)
def create_team_member(data: TeamMemberCreate, db: Session = Depends(get_db)):
    """Create a member and open their leave balances for the current year."""
    member = TeamDirectoryService(db).create_member(data)
    LeaveBalanceService(db).initialize_leave_balances_for_member(member.id)
    db.refresh(member)
    return member


@router.get("/team-members/{member_id}", response_model=TeamMemberResponse)
def get_team_member(member_id: str, db: Session = Depends(get_db)):
    return TeamDirectoryService(db).get_member(member_id)


@router.patch("/team-members/{member_id}", response_model=TeamMemberResponse)
def update_team_member(member_id: str, data: TeamMemberUpdate, db: Session = Depends(get_db)):
    return TeamDirectoryService(db).update_member(member_id, data)
