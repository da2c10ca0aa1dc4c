from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agency_hr.database import get_db
from agency_hr.schemas.leave import (
    LeavePolicyCreate,
    LeavePolicyResponse,
    LeavePolicyUpdate,
    PolicySeedResult,
)
from agency_hr.services.leave_policies import LeavePolicyService

router = APIRouter(prefix="/leave-policies")


@router.get("", response_model=List[LeavePolicyResponse])
def list_leave_policies(
    job_role_id: Optional[str] = None,
    leave_type_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return LeavePolicyService(db).list_policies(job_role_id=job_role_id, leave_type_id=leave_type_id)


@router.post("", response_model=LeavePolicyResponse, status_code=201)
def create_leave_policy(data: LeavePolicyCreate, db: Session = Depends(get_db)):
    return LeavePolicyService(db).create_policy(data)


@router.post("/seed", response_model=PolicySeedResult)
def seed_leave_policies(db: Session = Depends(get_db)):
    return LeavePolicyService(db).seed_default_leave_policies()


@router.patch("/{policy_id}", response_model=LeavePolicyResponse)
def update_leave_policy(policy_id: str, data: LeavePolicyUpdate, db: Session = Depends(get_db)):
    return LeavePolicyService(db).update_policy(policy_id, data)


@router.delete("/{policy_id}")
def delete_leave_policy(policy_id: str, db: Session = Depends(get_db)):
    LeavePolicyService(db).delete_policy(policy_id)
    return {"success": True}
