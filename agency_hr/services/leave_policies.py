from typing import Dict, List, Optional

from agency_hr.core.exceptions import ConflictError, NotFoundError
from agency_hr.models.leave_policy import LeavePolicy
from agency_hr.models.leave_type import LeaveType, LeaveCategory
from agency_hr.models.team_member import JobRole, RecordStatus
from agency_hr.schemas.leave import LeavePolicyCreate, LeavePolicyUpdate, PolicySeedResult
from agency_hr.services.base import BaseService

# Category defaults: (annual quota, carry-forward limit) in days
DEFAULT_QUOTAS: Dict[str, Dict[str, float]] = {
    LeaveCategory.CASUAL.value: {"annual": 12, "carry_forward": 3},
    LeaveCategory.SICK.value: {"annual": 10, "carry_forward": 0},
    LeaveCategory.EARNED.value: {"annual": 15, "carry_forward": 5},
    LeaveCategory.MATERNITY.value: {"annual": 180, "carry_forward": 0},
    LeaveCategory.PATERNITY.value: {"annual": 15, "carry_forward": 0},
    LeaveCategory.UNPAID.value: {"annual": 30, "carry_forward": 0},
    LeaveCategory.COMPENSATORY.value: {"annual": 10, "carry_forward": 5},
    LeaveCategory.OTHER.value: {"annual": 5, "carry_forward": 0},
}


def default_quota_for(category: Optional[str]) -> Dict[str, float]:
    return DEFAULT_QUOTAS.get(category or "", DEFAULT_QUOTAS[LeaveCategory.OTHER.value])


class LeavePolicyService(BaseService):
    """Per (job role, leave type) entitlement table."""

    def list_policies(self, job_role_id: Optional[str] = None, leave_type_id: Optional[str] = None) -> List[LeavePolicy]:
        query = self.db.query(LeavePolicy)
        if job_role_id:
            query = query.filter(LeavePolicy.job_role_id == job_role_id)
        if leave_type_id:
            query = query.filter(LeavePolicy.leave_type_id == leave_type_id)
        return query.all()

    def get_policy(self, policy_id: str) -> LeavePolicy:
        return self._get_or_404(LeavePolicy, policy_id, "Leave policy")

    def policy_for(self, job_role_id: Optional[str], leave_type_id: str) -> Optional[LeavePolicy]:
        if not job_role_id:
            return None
        return self.db.query(LeavePolicy).filter(
            LeavePolicy.job_role_id == job_role_id,
            LeavePolicy.leave_type_id == leave_type_id,
            LeavePolicy.is_active == True,  # noqa: E712
        ).first()

    def create_policy(self, data: LeavePolicyCreate) -> LeavePolicy:
        if self.db.get(JobRole, data.job_role_id) is None:
            raise NotFoundError("Job role", data.job_role_id)
        if self.db.get(LeaveType, data.leave_type_id) is None:
            raise NotFoundError("Leave type", data.leave_type_id)
        if self._find(data.job_role_id, data.leave_type_id):
            raise ConflictError(
                "A policy for this job role and leave type already exists",
                details={"job_role_id": data.job_role_id, "leave_type_id": data.leave_type_id},
            )
        policy = LeavePolicy(**data.model_dump())
        self.db.add(policy)
        self._commit("A policy for this job role and leave type already exists")
        self.db.refresh(policy)
        return policy

    def update_policy(self, policy_id: str, data: LeavePolicyUpdate) -> LeavePolicy:
        policy = self.get_policy(policy_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(policy, field, value)
        self._commit()
        self.db.refresh(policy)
        return policy

    def delete_policy(self, policy_id: str) -> None:
        policy = self.get_policy(policy_id)
        self.db.delete(policy)
        self._commit()

    def seed_default_leave_policies(self) -> PolicySeedResult:
        """Fill every missing (active job role, active leave type) pair from category defaults."""
        roles = self.db.query(JobRole).filter(JobRole.status == RecordStatus.ACTIVE.value).all()
        types = self.db.query(LeaveType).filter(LeaveType.is_active == True).all()  # noqa: E712
        self.log_info(f"Found {len(roles)} job roles and {len(types)} leave types for policy generation")

        created = skipped = 0
        for role in roles:
            for leave_type in types:
                if self._find(role.id, leave_type.id):
                    skipped += 1
                    continue
                quota = default_quota_for(leave_type.category)
                self.db.add(LeavePolicy(
                    job_role_id=role.id,
                    leave_type_id=leave_type.id,
                    annual_quota=quota["annual"],
                    carry_forward_limit=quota["carry_forward"],
                    is_active=True,
                ))
                created += 1
        if created:
            self._commit("Leave policies were seeded concurrently")
        return PolicySeedResult(created=created, skipped=skipped)

    def _find(self, job_role_id: str, leave_type_id: str) -> Optional[LeavePolicy]:
        return self.db.query(LeavePolicy).filter(
            LeavePolicy.job_role_id == job_role_id,
            LeavePolicy.leave_type_id == leave_type_id,
        ).first()
