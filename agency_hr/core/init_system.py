import logging
from agency_hr.database import SessionLocal
from agency_hr.services.leave_types import LeaveTypeService

logger = logging.getLogger(__name__)

def init_system_data():
    """
    Checks if the system needs initialization.
    If the leave type registry is empty, seeds the default casual, sick and
    earned leave types so balances can be opened for new members.
    """
    db = SessionLocal()
    try:
        created = LeaveTypeService(db).seed_default_leave_types()
        if created:
            logger.info(f"✓ Seeded default leave types: {', '.join(t.code for t in created)}")
        else:
            logger.info("System initialization check: leave types already present.")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during system initialization check: {str(e)}", exc_info=True)
    finally:
        db.close()
