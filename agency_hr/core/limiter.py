from slowapi import Limiter
from slowapi.util import get_remote_address

from agency_hr.core.config import settings

limiter = Limiter(key_func=get_remote_address)

# Inbound webhook budget per client address
WEBHOOK_RATE_LIMIT = f"{settings.rate_limit_per_minute}/minute"
