from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agency_hr.database import get_db
from agency_hr.models.leave_request import LeaveStatus
from agency_hr.schemas.leave import (
    LeaveApproval,
    LeaveRejection,
    LeaveRequestCreate,
    LeaveRequestResponse,
)
from agency_hr.services.leave_requests import LeaveRequestService

router = APIRouter(prefix="/leave-requests")


@router.get("", response_model=List[LeaveRequestResponse])
def list_leave_requests(
    team_member_id: Optional[str] = None,
    status: Optional[LeaveStatus] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    return LeaveRequestService(db).list_requests(
        team_member_id=team_member_id,
        status=status.value if status else None,
        from_date=from_date,
        to_date=to_date,
    )


@router.post("", response_model=LeaveRequestResponse, status_code=201)
def create_leave_request(data: LeaveRequestCreate, db: Session = Depends(get_db)):
    """
    Submit a PENDING request. Fails with 422 INSUFFICIENT_LEAVE_BALANCE,
    carrying the shortfall in ``details``, when the balance cannot cover it.
    """
    return LeaveRequestService(db).create_request(data)


@router.get("/{request_id}", response_model=LeaveRequestResponse)
def get_leave_request(request_id: str, db: Session = Depends(get_db)):
    return LeaveRequestService(db).get_request(request_id)


@router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
def approve_leave_request(request_id: str, data: LeaveApproval, db: Session = Depends(get_db)):
    return LeaveRequestService(db).approve_request(request_id, data.approved_by)


@router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
def reject_leave_request(request_id: str, data: LeaveRejection, db: Session = Depends(get_db)):
    return LeaveRequestService(db).reject_request(request_id, data.rejection_reason)


@router.post("/{request_id}/cancel", response_model=LeaveRequestResponse)
def cancel_leave_request(request_id: str, db: Session = Depends(get_db)):
    return LeaveRequestService(db).cancel_request(request_id)


@router.delete("/{request_id}")
def delete_leave_request(request_id: str, db: Session = Depends(get_db)):
    LeaveRequestService(db).delete_request(request_id)
    return {"success": True}
