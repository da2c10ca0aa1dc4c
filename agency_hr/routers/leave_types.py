from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agency_hr.database import get_db
from agency_hr.schemas.leave import LeaveTypeCreate, LeaveTypeResponse, LeaveTypeUpdate
from agency_hr.services.leave_types import LeaveTypeService

router = APIRouter(prefix="/leave-types")


@router.get("", response_model=List[LeaveTypeResponse])
def list_leave_types(is_active: Optional[bool] = None, db: Session = Depends(get_db)):
    return LeaveTypeService(db).list_types(is_active=is_active)


@router.post("", response_model=LeaveTypeResponse, status_code=201)
def create_leave_type(data: LeaveTypeCreate, db: Session = Depends(get_db)):
    return LeaveTypeService(db).create_type(data)


@router.post("/seed", response_model=List[LeaveTypeResponse])
def seed_leave_types(db: Session = Depends(get_db)):
    """Create the default casual/sick/earned types when none exist yet."""
    return LeaveTypeService(db).seed_default_leave_types()


@router.get("/{leave_type_id}", response_model=LeaveTypeResponse)
def get_leave_type(leave_type_id: str, db: Session = Depends(get_db)):
    return LeaveTypeService(db).get_type(leave_type_id)


@router.patch("/{leave_type_id}", response_model=LeaveTypeResponse)
def update_leave_type(leave_type_id: str, data: LeaveTypeUpdate, db: Session = Depends(get_db)):
    return LeaveTypeService(db).update_type(leave_type_id, data)
