from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agency_hr.database import get_db
from agency_hr.schemas.leave import (
    LeaveAvailability,
    LeaveBalanceRecalculate,
    LeaveBalanceResponse,
)
from agency_hr.services.leave_balance import LeaveBalanceService

router = APIRouter(prefix="/leave-balances")


@router.get("", response_model=List[LeaveBalanceResponse])
def list_leave_balances(
    team_member_id: Optional[str] = None,
    year: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return LeaveBalanceService(db).list_balances(team_member_id=team_member_id, year=year)


@router.get("/availability", response_model=LeaveAvailability)
def check_leave_availability(
    team_member_id: str,
    leave_type_id: str,
    days: float = Query(gt=0),
    year: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return LeaveBalanceService(db).check_leave_availability(team_member_id, leave_type_id, days, year=year)


@router.post("/recalculate", response_model=LeaveBalanceResponse)
def recalculate_leave_balance(data: LeaveBalanceRecalculate, db: Session = Depends(get_db)):
    return LeaveBalanceService(db).recalculate_leave_balance(data.team_member_id, data.leave_type_id, data.year)


@router.post("/{team_member_id}/initialize", response_model=List[LeaveBalanceResponse])
def initialize_leave_balances(team_member_id: str, year: Optional[int] = None, db: Session = Depends(get_db)):
    service = LeaveBalanceService(db)
    service.initialize_leave_balances_for_member(team_member_id, year=year)
    return service.list_balances(team_member_id=team_member_id, year=year or service.today.year)


@router.post("/{team_member_id}/reinitialize", response_model=List[LeaveBalanceResponse])
def reinitialize_leave_balances(team_member_id: str, db: Session = Depends(get_db)):
    return LeaveBalanceService(db).reinitialize_leave_balances_for_member(team_member_id)
