"""
Leave Request Workflow

State machine:
    PENDING --approve--> APPROVED --cancel--> CANCELLED
    PENDING --reject---> REJECTED
    PENDING --cancel---> CANCELLED
    REJECTED --cancel--> CANCELLED

CANCELLED is final. Every transition, and hard deletion,
re-derives the (member, type, year of start date) balance through the
ledger; no transition edits balance counters directly.
"""

from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from agency_hr.core.exceptions import (
    BusinessRuleError,
    InsufficientLeaveBalanceError,
    InvalidStatusTransitionError,
)
from agency_hr.core.security import sanitize_input
from agency_hr.models.leave_balance import LeaveBalance
from agency_hr.models.leave_request import LeaveRequest, LeaveStatus
from agency_hr.models.leave_type import LeaveType
from agency_hr.schemas.leave import LeaveRequestCreate
from agency_hr.services.base import BaseService
from agency_hr.services.leave_balance import LeaveBalanceService

ALLOWED_TRANSITIONS = {
    LeaveStatus.PENDING: {LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED},
    LeaveStatus.APPROVED: {LeaveStatus.CANCELLED},
    LeaveStatus.REJECTED: {LeaveStatus.CANCELLED},
    LeaveStatus.CANCELLED: set(),
}


class LeaveRequestService(BaseService):

    def __init__(self, db: Session, today: Optional[date] = None):
        super().__init__(db)
        self.ledger = LeaveBalanceService(db, today=today)

    def list_requests(
        self,
        team_member_id: Optional[str] = None,
        status: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> List[LeaveRequest]:
        query = self.db.query(LeaveRequest)
        if team_member_id:
            query = query.filter(LeaveRequest.team_member_id == team_member_id)
        if status:
            query = query.filter(LeaveRequest.status == status)
        if from_date:
            query = query.filter(LeaveRequest.start_date >= from_date)
        if to_date:
            query = query.filter(LeaveRequest.start_date <= to_date)
        return query.order_by(LeaveRequest.created_at.desc()).all()

    def get_request(self, request_id: str) -> LeaveRequest:
        return self._get_or_404(LeaveRequest, request_id, "Leave request")

    def create_request(self, data: LeaveRequestCreate) -> LeaveRequest:
        """
        Check availability and insert the PENDING request in one transaction.

        The balance row is locked (SELECT ... FOR UPDATE) before the check, so
        two concurrent requests for the same member and leave type serialize
        instead of both passing the check and overdrawing the balance.
        """
        member = self.ledger.directory.get_member(data.team_member_id)
        leave_type = self._get_or_404(LeaveType, data.leave_type_id, "Leave type")
        if not leave_type.is_active:
            raise BusinessRuleError(f"Leave type {leave_type.name} is not active")

        year = data.start_date.year
        try:
            balance = self.ledger.ensure_balance(member.id, leave_type.id, year)
            balance = self.db.query(LeaveBalance).filter(
                LeaveBalance.id == balance.id
            ).with_for_update().populate_existing().one()
            # Re-derive under the lock so the check sees every committed request
            balance = self.ledger.recompute_balance(member.id, leave_type.id, year, balance=balance)

            availability = self.ledger.availability_from_balance(balance, data.total_days, leave_type.name)
            if not availability.available:
                raise InsufficientLeaveBalanceError(availability.message, details=availability.model_dump())

            request = LeaveRequest(
                team_member_id=member.id,
                leave_type_id=leave_type.id,
                start_date=data.start_date,
                end_date=data.end_date,
                total_days=data.total_days,
                reason=sanitize_input(data.reason),
                status=LeaveStatus.PENDING.value,
            )
            self.db.add(request)
            self.ledger.recompute_balance(member.id, leave_type.id, year, balance=balance)
        except Exception:
            self.db.rollback()
            raise
        self._commit("Leave balance was created concurrently, retry the request")
        self.db.refresh(request)
        self.log_info(
            f"Leave request {request.id} created for {member.id}: {request.total_days} day(s)",
            team_member_id=member.id,
            leave_request_id=request.id,
        )
        return request

    def approve_request(self, request_id: str, approved_by: str) -> LeaveRequest:
        request = self.get_request(request_id)
        self._transition(request, LeaveStatus.APPROVED)
        request.approved_by = approved_by
        request.approved_at = datetime.now(timezone.utc)
        return self._finish(request, "approved")

    def reject_request(self, request_id: str, rejection_reason: str) -> LeaveRequest:
        request = self.get_request(request_id)
        self._transition(request, LeaveStatus.REJECTED)
        request.rejection_reason = sanitize_input(rejection_reason)
        return self._finish(request, "rejected")

    def cancel_request(self, request_id: str) -> LeaveRequest:
        request = self.get_request(request_id)
        self._transition(request, LeaveStatus.CANCELLED)
        return self._finish(request, "cancelled")

    def delete_request(self, request_id: str) -> None:
        request = self.get_request(request_id)
        member_id, leave_type_id, year = request.team_member_id, request.leave_type_id, request.start_date.year
        self.db.delete(request)
        self.db.flush()
        self.ledger.recompute_balance(member_id, leave_type_id, year)
        self._commit()
        self.log_info(f"Leave request {request_id} deleted", leave_request_id=request_id)

    def _transition(self, request: LeaveRequest, target: LeaveStatus) -> None:
        current = LeaveStatus(request.status)
        if target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidStatusTransitionError("leave request", current.value, target.value)
        request.status = target.value

    def _finish(self, request: LeaveRequest, verb: str) -> LeaveRequest:
        self.ledger.recompute_balance(request.team_member_id, request.leave_type_id, request.start_date.year)
        self._commit()
        self.db.refresh(request)
        self.log_info(f"Leave request {request.id} {verb}", leave_request_id=request.id)
        return request
