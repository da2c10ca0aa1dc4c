import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _csv_env(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class SlackConfig(BaseModel):
    """Environment-level Slack defaults, used when no settings row is stored."""
    signing_secret: Optional[str] = Field(default=os.getenv("SLACK_SIGNING_SECRET"))
    bot_token: Optional[str] = Field(default=os.getenv("SLACK_BOT_TOKEN"))
    check_in_channel_id: Optional[str] = Field(default=os.getenv("SLACK_CHECKIN_CHANNEL_ID"))
    api_base_url: str = os.getenv("SLACK_API_BASE_URL", "https://slack.com/api")
    api_timeout_seconds: float = float(os.getenv("SLACK_API_TIMEOUT_SECONDS", "10"))
    # Replay window for signed requests
    request_max_age_seconds: int = int(os.getenv("SLACK_REQUEST_MAX_AGE_SECONDS", "300"))
    ack_reaction: str = os.getenv("SLACK_ACK_REACTION", "white_check_mark")
    check_in_keywords: List[str] = Field(
        default_factory=lambda: _csv_env(
            "SLACK_CHECKIN_KEYWORDS",
            "good morning,gm,starting work,today's tasks,morning update,morning todos",
        )
    )
    check_out_keywords: List[str] = Field(
        default_factory=lambda: _csv_env(
            "SLACK_CHECKOUT_KEYWORDS",
            "signing off,done for the day,wrapping up,eod,end of day,logging off,good night",
        )
    )


class Config(BaseModel):
    app_name: str = "Agency HR"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./database.db")

    # Secrets
    secret_key: str = os.getenv("SECRET_KEY", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    encryption_key: Optional[str] = os.getenv("ENCRYPTION_KEY")

    # Integrations
    slack: SlackConfig = SlackConfig()

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    cors_origins: List[str] = Field(
        default_factory=lambda: _csv_env(
            "CORS_ORIGINS",
            "http://localhost:5000,http://localhost:3000,http://127.0.0.1:5000,http://127.0.0.1:3000",
        )
    )

    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "120"))

    # Leave ledger
    default_annual_quota: float = float(os.getenv("DEFAULT_ANNUAL_QUOTA", "10"))

settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment == "production":
    _critical_missing = []
    if "dev-only" in settings.secret_key:
        _critical_missing.append("SECRET_KEY")
    if not settings.encryption_key:
        _critical_missing.append("ENCRYPTION_KEY")
    if _critical_missing:
        raise RuntimeError(
            f"FATAL: The following secrets must be set for production: "
            f"{', '.join(_critical_missing)}. Set them as environment variables."
        )
elif "dev-only" in settings.secret_key:
    _logger.warning("Using insecure default SECRET_KEY, only acceptable outside production.")
