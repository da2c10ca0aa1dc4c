from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agency_hr.database import get_db
from agency_hr.models.attendance import AttendanceStatus
from agency_hr.schemas.attendance import (
    AttendanceBulkCreate,
    AttendanceCreate,
    AttendanceResponse,
    AttendanceUpdate,
    WorkingHoursRequest,
    WorkingHoursResponse,
)
from agency_hr.services.attendance import AttendanceService, calculate_working_hours

router = APIRouter(prefix="/attendance")


@router.get("", response_model=List[AttendanceResponse])
def list_attendance(
    team_member_id: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    status: Optional[AttendanceStatus] = None,
    db: Session = Depends(get_db),
):
    return AttendanceService(db).list_attendance(
        team_member_id=team_member_id,
        from_date=from_date,
        to_date=to_date,
        status=status.value if status else None,
    )


@router.post("", response_model=AttendanceResponse, status_code=201)
def create_attendance(data: AttendanceCreate, db: Session = Depends(get_db)):
    return AttendanceService(db).create_attendance(data)


@router.post("/bulk", response_model=List[AttendanceResponse], status_code=201)
def bulk_create_attendance(data: AttendanceBulkCreate, db: Session = Depends(get_db)):
    return AttendanceService(db).bulk_create_attendance(data.records)


@router.post("/working-hours", response_model=WorkingHoursResponse)
def working_hours(data: WorkingHoursRequest):
    working, overtime = calculate_working_hours(data.check_in, data.check_out)
    return WorkingHoursResponse(working_hours=working, overtime_hours=overtime)


@router.get("/{attendance_id}", response_model=AttendanceResponse)
def get_attendance(attendance_id: str, db: Session = Depends(get_db)):
    return AttendanceService(db).get_attendance(attendance_id)


@router.patch("/{attendance_id}", response_model=AttendanceResponse)
def update_attendance(attendance_id: str, data: AttendanceUpdate, db: Session = Depends(get_db)):
    return AttendanceService(db).update_attendance(attendance_id, data)


@router.delete("/{attendance_id}")
def delete_attendance(attendance_id: str, db: Session = Depends(get_db)):
    AttendanceService(db).delete_attendance(attendance_id)
    return {"success": True}
