"""
Team directory collaborator: employees and job roles as the leave and
attendance core needs them.
"""
from typing import List, Optional

from agency_hr.core.exceptions import ConflictError
from agency_hr.models.team_member import JobRole, TeamMember
from agency_hr.schemas.team import JobRoleCreate, TeamMemberCreate, TeamMemberUpdate
from agency_hr.services.base import BaseService


class TeamDirectoryService(BaseService):

    # --- Job roles ---

    def list_job_roles(self, status: Optional[str] = None) -> List[JobRole]:
        query = self.db.query(JobRole)
        if status:
            query = query.filter(JobRole.status == status)
        return query.order_by(JobRole.title).all()

    def create_job_role(self, data: JobRoleCreate) -> JobRole:
        if self.db.query(JobRole).filter(JobRole.title == data.title).first():
            raise ConflictError(f"Job role '{data.title}' already exists")
        role = JobRole(title=data.title, description=data.description, status=data.status.value)
        self.db.add(role)
        self._commit(f"Job role '{data.title}' already exists")
        self.db.refresh(role)
        return role

    def job_role_id_for_member(self, member: TeamMember) -> Optional[str]:
        """Policies hang off job roles, which members reference by title."""
        if not member.role_title:
            return None
        role = self.db.query(JobRole).filter(JobRole.title == member.role_title).first()
        return role.id if role else None

    # --- Members ---

    def list_members(self, status: Optional[str] = None) -> List[TeamMember]:
        query = self.db.query(TeamMember)
        if status:
            query = query.filter(TeamMember.status == status)
        return query.order_by(TeamMember.name).all()

    def get_member(self, member_id: str) -> TeamMember:
        return self._get_or_404(TeamMember, member_id, "Team member")

    def find_member(self, member_id: str) -> Optional[TeamMember]:
        return self.db.get(TeamMember, member_id)

    def get_member_by_slack_user_id(self, slack_user_id: str) -> Optional[TeamMember]:
        if not slack_user_id:
            return None
        return self.db.query(TeamMember).filter(TeamMember.slack_user_id == slack_user_id).first()

    def create_member(self, data: TeamMemberCreate) -> TeamMember:
        self._ensure_unique(email=data.email, slack_user_id=data.slack_user_id)
        member = TeamMember(**data.model_dump())
        self.db.add(member)
        self._commit("Team member with this email or Slack user already exists")
        self.db.refresh(member)
        self.log_info(f"Created team member {member.id}", team_member_id=member.id)
        return member

    def update_member(self, member_id: str, data: TeamMemberUpdate) -> TeamMember:
        member = self.get_member(member_id)
        changes = data.model_dump(exclude_unset=True)
        self._ensure_unique(
            email=changes.get("email"),
            slack_user_id=changes.get("slack_user_id"),
            exclude_id=member.id,
        )
        for field, value in changes.items():
            if field == "status" and value is not None:
                value = value.value
            setattr(member, field, value)
        self._commit("Team member with this email or Slack user already exists")
        self.db.refresh(member)
        return member

    def _ensure_unique(self, email: Optional[str], slack_user_id: Optional[str], exclude_id: Optional[str] = None):
        if email:
            query = self.db.query(TeamMember).filter(TeamMember.email == email)
            if exclude_id:
                query = query.filter(TeamMember.id != exclude_id)
            if query.first():
                raise ConflictError(f"Team member with email '{email}' already exists")
        if slack_user_id:
            query = self.db.query(TeamMember).filter(TeamMember.slack_user_id == slack_user_id)
            if exclude_id:
                query = query.filter(TeamMember.id != exclude_id)
            if query.first():
                raise ConflictError(f"Slack user '{slack_user_id}' is already linked to another member")

