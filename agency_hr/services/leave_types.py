from typing import List, Optional

from agency_hr.core.exceptions import ConflictError
from agency_hr.models.leave_type import LeaveType, LeaveCategory
from agency_hr.schemas.leave import LeaveTypeCreate, LeaveTypeUpdate
from agency_hr.services.base import BaseService

DEFAULT_LEAVE_TYPES = [
    {"name": "Casual Leave", "code": "CL", "category": LeaveCategory.CASUAL, "description": "For personal or casual reasons"},
    {"name": "Sick Leave", "code": "SL", "category": LeaveCategory.SICK, "description": "For health-related absences"},
    {"name": "Earned Leave", "code": "EL", "category": LeaveCategory.EARNED, "description": "Accrued leave based on service"},
]


class LeaveTypeService(BaseService):
    """Registry of named leave categories."""

    def list_types(self, is_active: Optional[bool] = None) -> List[LeaveType]:
        query = self.db.query(LeaveType)
        if is_active is not None:
            query = query.filter(LeaveType.is_active == is_active)
        return query.order_by(LeaveType.name).all()

    def get_type(self, leave_type_id: str) -> LeaveType:
        return self._get_or_404(LeaveType, leave_type_id, "Leave type")

    def create_type(self, data: LeaveTypeCreate) -> LeaveType:
        code = data.code.upper()
        self._ensure_code_free(code)
        leave_type = LeaveType(
            name=data.name,
            code=code,
            category=data.category.value,
            description=data.description,
            is_paid=data.is_paid,
            is_active=data.is_active,
        )
        self.db.add(leave_type)
        self._commit(f"Leave type code '{code}' already exists")
        self.db.refresh(leave_type)
        return leave_type

    def update_type(self, leave_type_id: str, data: LeaveTypeUpdate) -> LeaveType:
        leave_type = self.get_type(leave_type_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("code"):
            changes["code"] = changes["code"].upper()
            if changes["code"] != leave_type.code:
                self._ensure_code_free(changes["code"])
        if changes.get("category") is not None:
            changes["category"] = changes["category"].value
        for field, value in changes.items():
            setattr(leave_type, field, value)
        self._commit("Leave type code already exists")
        self.db.refresh(leave_type)
        return leave_type

    def seed_default_leave_types(self) -> List[LeaveType]:
        """Create the standard casual/sick/earned types on an empty registry."""
        if self.db.query(LeaveType).count() > 0:
            return []
        created = []
        for default in DEFAULT_LEAVE_TYPES:
            leave_type = LeaveType(
                name=default["name"],
                code=default["code"],
                category=default["category"].value,
                description=default["description"],
                is_paid=True,
                is_active=True,
            )
            self.db.add(leave_type)
            created.append(leave_type)
        self._commit("Default leave types already seeded")
        self.log_info(f"Seeded {len(created)} default leave types")
        return created

    def _ensure_code_free(self, code: str) -> None:
        if self.db.query(LeaveType).filter(LeaveType.code == code).first():
            raise ConflictError(f"Leave type code '{code}' already exists")
