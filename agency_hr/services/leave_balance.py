"""
Leave Balance Ledger

Balances are derived state. ``used`` and ``pending`` are always recomputed
from the full set of leave requests of a (team member, leave type, year)
rather than adjusted by deltas, so any sequence of create / approve /
reject / cancel / delete converges to the same numbers and re-running the
recalculation is a no-op.

Invariant maintained on every write:
    available == max(0, total_quota + carry_forward - used - pending)
"""

from datetime import date
from typing import List, Optional, Tuple
import logging

from sqlalchemy.orm import Session

from agency_hr.core.config import settings
from agency_hr.core.exceptions import NotFoundError
from agency_hr.models.leave_balance import LeaveBalance
from agency_hr.models.leave_request import LeaveRequest, LeaveStatus
from agency_hr.models.leave_type import LeaveType
from agency_hr.models.team_member import TeamMember
from agency_hr.schemas.leave import LeaveAvailability
from agency_hr.services.base import BaseService
from agency_hr.services.leave_policies import DEFAULT_QUOTAS, LeavePolicyService
from agency_hr.services.team_directory import TeamDirectoryService

logger = logging.getLogger(__name__)


def prorated_quota(annual_quota: float, joined_date: Optional[date], year: int) -> float:
    """
    Scale an annual quota by the months remaining after the join date.

    Joining in month index m (0-based) of ``year`` yields
    round(annual_quota * (12 - m) / 12, 2). Members who joined before ``year``
    get the full quota; members who join after it get nothing.
    """
    if joined_date is None or joined_date.year < year:
        return float(annual_quota)
    if joined_date.year > year:
        return 0.0
    remaining_months = 12 - (joined_date.month - 1)
    return round(annual_quota * remaining_months / 12, 2)


def compute_available(total_quota: float, carry_forward: float, used: float, pending: float) -> float:
    return round(max(0.0, (total_quota or 0) + (carry_forward or 0) - (used or 0) - (pending or 0)), 2)


def _fmt_days(value: float) -> str:
    return f"{value:g}"


class LeaveBalanceService(BaseService):

    def __init__(self, db: Session, today: Optional[date] = None):
        super().__init__(db)
        self.directory = TeamDirectoryService(db)
        self.policies = LeavePolicyService(db)
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_balances(self, team_member_id: Optional[str] = None, year: Optional[int] = None) -> List[LeaveBalance]:
        query = self.db.query(LeaveBalance)
        if team_member_id:
            query = query.filter(LeaveBalance.team_member_id == team_member_id)
        if year:
            query = query.filter(LeaveBalance.year == year)
        return query.order_by(LeaveBalance.year.desc()).all()

    def get_balance(self, team_member_id: str, leave_type_id: str, year: int) -> Optional[LeaveBalance]:
        return self.db.query(LeaveBalance).filter(
            LeaveBalance.team_member_id == team_member_id,
            LeaveBalance.leave_type_id == leave_type_id,
            LeaveBalance.year == year,
        ).first()

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def initialize_leave_balances_for_member(
        self,
        team_member_id: str,
        joined_date: Optional[date] = None,
        year: Optional[int] = None,
        commit: bool = True,
    ) -> List[LeaveBalance]:
        """
        Create the missing balances of ``year`` (default: current year) for
        every active leave type. Existing rows are left untouched, so calling
        this twice creates nothing the second time.

        Quota comes from the policy of the member's job role, or from the
        category default table when the role has no policy for the type.
        """
        member = self.directory.get_member(team_member_id)
        year = year or self.today.year
        joined = joined_date or self._joined_date(member)
        job_role_id = self.directory.job_role_id_for_member(member)

        created = []
        leave_types = self.db.query(LeaveType).filter(LeaveType.is_active == True).all()  # noqa: E712
        for leave_type in leave_types:
            if self.get_balance(member.id, leave_type.id, year):
                continue
            balance = self._new_balance(member, leave_type, year, joined, job_role_id)
            created.append(balance)

        self.db.flush()
        if commit:
            self._commit("Leave balances were initialized concurrently, retry the request")
            for balance in created:
                self.db.refresh(balance)
        if created:
            self.log_info(
                f"Initialized {len(created)} leave balances for {member.id} ({year})",
                team_member_id=member.id,
            )
        return created

    def reinitialize_leave_balances_for_member(self, team_member_id: str) -> List[LeaveBalance]:
        """Drop the current year's rows and rebuild them from policy and requests."""
        member = self.directory.get_member(team_member_id)
        year = self.today.year
        self.db.query(LeaveBalance).filter(
            LeaveBalance.team_member_id == member.id,
            LeaveBalance.year == year,
        ).delete(synchronize_session=False)
        self.db.flush()
        self.db.expire_all()

        created = self.initialize_leave_balances_for_member(member.id, year=year, commit=False)
        for balance in created:
            self.recompute_balance(member.id, balance.leave_type_id, year, balance=balance)
        self._commit("Leave balances were initialized concurrently, retry the request")
        for balance in created:
            self.db.refresh(balance)
        return created

    def _joined_date(self, member: TeamMember) -> date:
        """A member without a recorded join date is treated as joining today."""
        return member.joined_date or self.today

    def _new_balance(
        self,
        member: TeamMember,
        leave_type: LeaveType,
        year: int,
        joined_date: Optional[date],
        job_role_id: Optional[str],
    ) -> LeaveBalance:
        policy = self.policies.policy_for(job_role_id, leave_type.id)
        if policy is not None:
            annual_quota = policy.annual_quota
            carry_limit = policy.carry_forward_limit
        else:
            defaults = DEFAULT_QUOTAS.get(leave_type.category)
            annual_quota = defaults["annual"] if defaults else settings.default_annual_quota
            carry_limit = defaults["carry_forward"] if defaults else 0.0

        total_quota = prorated_quota(annual_quota, joined_date, year)
        carry_forward = self._carry_forward(member.id, leave_type.id, year, carry_limit)
        balance = LeaveBalance(
            team_member_id=member.id,
            leave_type_id=leave_type.id,
            year=year,
            total_quota=total_quota,
            used=0.0,
            pending=0.0,
            carry_forward=carry_forward,
            available=compute_available(total_quota, carry_forward, 0.0, 0.0),
        )
        self.db.add(balance)
        return balance

    def _carry_forward(self, team_member_id: str, leave_type_id: str, year: int, limit: float) -> float:
        """Unused days of the previous year, capped by the policy limit."""
        if not limit:
            return 0.0
        previous = self.get_balance(team_member_id, leave_type_id, year - 1)
        if previous is None:
            return 0.0
        return round(min(float(limit), max(0.0, previous.available or 0.0)), 2)

    # ------------------------------------------------------------------
    # Recalculation
    # ------------------------------------------------------------------

    def recalculate_leave_balance(self, team_member_id: str, leave_type_id: str, year: int) -> LeaveBalance:
        balance = self.recompute_balance(team_member_id, leave_type_id, year)
        self._commit("Leave balance was created concurrently, retry the request")
        self.db.refresh(balance)
        return balance

    def ensure_balance(self, team_member_id: str, leave_type_id: str, year: int) -> LeaveBalance:
        """Return the (member, type, year) row, creating missing rows first. Flushes, never commits."""
        balance = self.get_balance(team_member_id, leave_type_id, year)
        if balance is not None:
            return balance

        member = self.directory.get_member(team_member_id)
        self.initialize_leave_balances_for_member(member.id, year=year, commit=False)
        balance = self.get_balance(member.id, leave_type_id, year)
        if balance is None:
            # Inactive types are skipped by initialization but may still carry requests
            leave_type = self.db.get(LeaveType, leave_type_id)
            if leave_type is None:
                raise NotFoundError("Leave type", leave_type_id)
            balance = self._new_balance(
                member, leave_type, year, self._joined_date(member),
                self.directory.job_role_id_for_member(member),
            )
            self.db.flush()
        return balance

    def recompute_balance(
        self,
        team_member_id: str,
        leave_type_id: str,
        year: int,
        balance: Optional[LeaveBalance] = None,
    ) -> LeaveBalance:
        self.db.flush()
        used, pending = self._sum_requests(team_member_id, leave_type_id, year)
        if balance is None:
            balance = self.ensure_balance(team_member_id, leave_type_id, year)

        balance.used = used
        balance.pending = pending
        balance.available = compute_available(balance.total_quota, balance.carry_forward, used, pending)
        self.db.flush()
        logger.debug(
            f"Recalculated balance {balance.id}: used={used} pending={pending} available={balance.available}"
        )
        return balance

    def _sum_requests(self, team_member_id: str, leave_type_id: str, year: int) -> Tuple[float, float]:
        requests = self.db.query(LeaveRequest).filter(
            LeaveRequest.team_member_id == team_member_id,
            LeaveRequest.leave_type_id == leave_type_id,
            LeaveRequest.start_date >= date(year, 1, 1),
            LeaveRequest.start_date <= date(year, 12, 31),
        ).all()

        used = 0.0
        pending = 0.0
        for request in requests:
            if request.status == LeaveStatus.APPROVED.value:
                used += request.total_days
            elif request.status == LeaveStatus.PENDING.value:
                pending += request.total_days
        return round(used, 2), round(pending, 2)

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def check_leave_availability(
        self,
        team_member_id: str,
        leave_type_id: str,
        requested_days: float,
        year: Optional[int] = None,
    ) -> LeaveAvailability:
        """
        Answer "can this member take ``requested_days`` of this leave type?".
        The only write is lazy initialization of a missing balance row.
        """
        year = year or self.today.year
        leave_type = self.db.get(LeaveType, leave_type_id)
        leave_type_name = leave_type.name if leave_type else "Unknown"

        balance = self.get_balance(team_member_id, leave_type_id, year)
        if balance is None:
            member = self.directory.find_member(team_member_id)
            if member is None:
                return self._unavailable(requested_days, leave_type_name, "Team member not found")
            self.initialize_leave_balances_for_member(member.id, year=year)
            balance = self.get_balance(member.id, leave_type_id, year)

        if balance is None:
            return self._unavailable(
                requested_days,
                leave_type_name,
                f"No leave balance found for {leave_type_name}. Please contact HR to set up your leave policy.",
            )
        return self.availability_from_balance(balance, requested_days, leave_type_name)

    @staticmethod
    def availability_from_balance(balance: LeaveBalance, requested_days: float, leave_type_name: str) -> LeaveAvailability:
        total_quota = round((balance.total_quota or 0) + (balance.carry_forward or 0), 2)
        used = balance.used or 0.0
        pending = balance.pending or 0.0
        available_balance = compute_available(balance.total_quota, balance.carry_forward, used, pending)
        shortfall = round(max(0.0, requested_days - available_balance), 2)
        is_available = requested_days <= available_balance

        if is_available:
            remaining = round(available_balance - requested_days, 2)
            message = (
                f"You have {_fmt_days(available_balance)} {leave_type_name} days available. "
                f"After this request, you will have {_fmt_days(remaining)} days remaining."
            )
        else:
            message = (
                f"Insufficient {leave_type_name} balance. You have {_fmt_days(available_balance)} days available "
                f"but requested {_fmt_days(requested_days)} days. You are short by {_fmt_days(shortfall)} days."
            )

        return LeaveAvailability(
            available=is_available,
            balance=available_balance,
            pending=pending,
            used=used,
            total_quota=total_quota,
            requested_days=requested_days,
            shortfall=shortfall,
            leave_type_name=leave_type_name,
            message=message,
        )

    @staticmethod
    def _unavailable(requested_days: float, leave_type_name: str, message: str) -> LeaveAvailability:
        return LeaveAvailability(
            available=False,
            balance=0,
            pending=0,
            used=0,
            total_quota=0,
            requested_days=requested_days,
            shortfall=requested_days,
            leave_type_name=leave_type_name,
            message=message,
        )
