from agency_hr.database import SessionLocal, init_db
from agency_hr.models.team_member import RecordStatus, TeamMember
from agency_hr.services.leave_balance import LeaveBalanceService
from agency_hr.services.leave_policies import LeavePolicyService
from agency_hr.services.leave_types import LeaveTypeService

def seed():
    init_db()
    db = SessionLocal()
    try:
        # 1. Default leave types
        created_types = LeaveTypeService(db).seed_default_leave_types()
        print(f"Leave types created: {len(created_types)}")

        # 2. Policies for every active job role
        result = LeavePolicyService(db).seed_default_leave_policies()
        print(f"Leave policies created: {result.created}, skipped: {result.skipped}")

        # 3. Open this year's balances for active members
        ledger = LeaveBalanceService(db)
        members = db.query(TeamMember).filter(TeamMember.status == RecordStatus.ACTIVE.value).all()
        for member in members:
            created = ledger.initialize_leave_balances_for_member(member.id)
            if created:
                print(f"Opened {len(created)} balances for {member.email}")
    finally:
        db.close()

if __name__ == "__main__":
    seed()
