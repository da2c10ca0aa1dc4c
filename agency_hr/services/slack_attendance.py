"""
Slack Attendance Bridge

Turns messages posted in the check-in channel into attendance check-ins and
check-outs. Every classified message from a known team member leaves one
SlackAttendanceLog row keyed by the Slack message ``ts``, so a redelivered
event is applied at most once.
"""
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Tuple
import logging

from pydantic import BaseModel
from sqlalchemy.orm import Session

from agency_hr.core.config import settings
from agency_hr.core.exceptions import BusinessRuleError, ConflictError
from agency_hr.core.security import decrypt_data, encrypt_data, mask_secret
from agency_hr.models.slack import SlackAttendanceLog, SlackEventType, SlackOutcome, SlackSettings
from agency_hr.schemas.slack import (
    SlackConnectionResult,
    SlackSettingsCreate,
    SlackSettingsResponse,
    SlackSettingsUpdate,
)
from agency_hr.services.attendance import AttendanceService
from agency_hr.services.base import BaseService
from agency_hr.services.slack_client import SlackClient
from agency_hr.services.team_directory import TeamDirectoryService

logger = logging.getLogger(__name__)


def _match(text: str, keywords: List[str]) -> Optional[str]:
    for keyword in keywords:
        if keyword and keyword.lower() in text:
            return keyword
    return None


def parse_message(
    text: str,
    check_in_keywords: List[str],
    check_out_keywords: List[str],
) -> Tuple[Optional[SlackEventType], Optional[str]]:
    """
    Classify a message by case-insensitive substring match.

    Check-out phrases are tried first so that "good night, signing off" is a
    check-out even though it might contain a check-in phrase too.
    """
    lowered = (text or "").lower()
    keyword = _match(lowered, check_out_keywords)
    if keyword:
        return SlackEventType.CHECK_OUT, keyword
    keyword = _match(lowered, check_in_keywords)
    if keyword:
        return SlackEventType.CHECK_IN, keyword
    return None, None


class SlackRuntimeConfig(BaseModel):
    """Decrypted settings the bridge runs with: the stored row, else the environment."""
    signing_secret: Optional[str] = None
    bot_token: Optional[str] = None
    check_in_channel_id: Optional[str] = None
    check_in_keywords: List[str] = []
    check_out_keywords: List[str] = []
    is_active: bool = False


class SlackSettingsService(BaseService):
    """Single-row Slack workspace configuration."""

    def get_settings(self) -> Optional[SlackSettings]:
        return self.db.query(SlackSettings).first()

    def save_settings(self, data: SlackSettingsCreate) -> SlackSettings:
        # Only one workspace connection is kept
        self.db.query(SlackSettings).delete(synchronize_session=False)
        row = SlackSettings(
            bot_token=encrypt_data(data.bot_token),
            signing_secret=encrypt_data(data.signing_secret),
            check_in_channel_id=data.check_in_channel_id,
            check_in_keywords=data.check_in_keywords or list(settings.slack.check_in_keywords),
            check_out_keywords=data.check_out_keywords or list(settings.slack.check_out_keywords),
            is_active=data.is_active,
        )
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        self.log_info("Slack settings saved", slack_settings_id=row.id)
        return row

    def update_settings(self, settings_id: str, data: SlackSettingsUpdate) -> SlackSettings:
        row = self._get_or_404(SlackSettings, settings_id, "Slack settings")
        changes = data.model_dump(exclude_unset=True)
        for secret in ("bot_token", "signing_secret"):
            if secret in changes:
                changes[secret] = encrypt_data(changes[secret])
        for field, value in changes.items():
            setattr(row, field, value)
        self._commit()
        self.db.refresh(row)
        return row

    def delete_settings(self) -> None:
        deleted = self.db.query(SlackSettings).delete(synchronize_session=False)
        self._commit()
        self.log_info(f"Slack settings deleted ({deleted} row(s))")

    def to_response(self, row: SlackSettings) -> SlackSettingsResponse:
        return SlackSettingsResponse(
            id=row.id,
            bot_token=mask_secret(decrypt_data(row.bot_token)),
            signing_secret=mask_secret(decrypt_data(row.signing_secret)),
            check_in_channel_id=row.check_in_channel_id,
            check_in_keywords=row.check_in_keywords or [],
            check_out_keywords=row.check_out_keywords or [],
            is_active=row.is_active,
            team_id=row.team_id,
            team_name=row.team_name,
        )

    def effective_config(self) -> SlackRuntimeConfig:
        row = self.get_settings()
        if row is not None:
            return SlackRuntimeConfig(
                signing_secret=decrypt_data(row.signing_secret),
                bot_token=decrypt_data(row.bot_token),
                check_in_channel_id=row.check_in_channel_id,
                check_in_keywords=row.check_in_keywords or list(settings.slack.check_in_keywords),
                check_out_keywords=row.check_out_keywords or list(settings.slack.check_out_keywords),
                is_active=row.is_active,
            )
        env = settings.slack
        return SlackRuntimeConfig(
            signing_secret=env.signing_secret,
            bot_token=env.bot_token,
            check_in_channel_id=env.check_in_channel_id,
            check_in_keywords=list(env.check_in_keywords),
            check_out_keywords=list(env.check_out_keywords),
            is_active=bool(env.signing_secret),
        )

    def client(self, bot_token: Optional[str] = None) -> SlackClient:
        token = bot_token or self.effective_config().bot_token
        if not token:
            raise BusinessRuleError("Slack bot token is not configured")
        return SlackClient(token)

    def test_connection(self, bot_token: Optional[str] = None) -> SlackConnectionResult:
        result = SlackConnectionResult(**self.client(bot_token).test_connection())
        row = self.get_settings()
        if result.ok and row is not None and bot_token is None:
            row.team_id = result.team_id
            row.team_name = result.team_name
            self._commit()
        return result


class SlackAttendanceBridge(BaseService):

    def __init__(self, db: Session):
        super().__init__(db)
        self.slack_settings = SlackSettingsService(db)
        self.directory = TeamDirectoryService(db)
        self.attendance = AttendanceService(db)

    def list_logs(
        self,
        team_member_id: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        event_type: Optional[str] = None,
    ) -> List[SlackAttendanceLog]:
        query = self.db.query(SlackAttendanceLog)
        if team_member_id:
            query = query.filter(SlackAttendanceLog.team_member_id == team_member_id)
        if from_date:
            query = query.filter(SlackAttendanceLog.timestamp >= datetime.combine(from_date, time.min))
        if to_date:
            query = query.filter(SlackAttendanceLog.timestamp <= datetime.combine(to_date, time.max))
        if event_type:
            query = query.filter(SlackAttendanceLog.event_type == event_type)
        return query.order_by(SlackAttendanceLog.timestamp.desc()).all()

    def handle_event(self, payload: Dict[str, Any], now: Optional[datetime] = None) -> Optional[SlackAttendanceLog]:
        """
        Apply one ``event_callback`` payload. Never raises: the webhook must
        ack Slack regardless of what happens here, so failures are logged
        and the unit of work is rolled back.
        """
        try:
            return self._process(payload, now or datetime.now())
        except ConflictError:
            self.log_info("Slack message already processed (concurrent delivery)")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error processing Slack event: {e}", exc_info=True)
        return None

    def _process(self, payload: Dict[str, Any], now: datetime) -> Optional[SlackAttendanceLog]:
        config = self.slack_settings.effective_config()
        if not config.is_active:
            logger.debug("Slack integration inactive, ignoring event")
            return None

        event = payload.get("event") or {}
        if event.get("type") != "message":
            return None
        # Bot posts, edits, deletes and joins all carry a subtype
        if event.get("bot_id") or event.get("subtype"):
            return None

        channel_id = event.get("channel")
        if config.check_in_channel_id and channel_id != config.check_in_channel_id:
            return None

        message_ts = event.get("ts")
        slack_user_id = event.get("user")
        text = event.get("text") or ""
        if not message_ts or not slack_user_id:
            return None

        if self._find_log(message_ts) is not None:
            self.log_info(f"Slack message {message_ts} already processed")
            return None

        member = self.directory.get_member_by_slack_user_id(slack_user_id)
        if member is None:
            self.log_info(f"No team member linked to Slack user {slack_user_id}")
            return None

        event_type, keyword = parse_message(text, config.check_in_keywords, config.check_out_keywords)
        if event_type is None:
            return None

        outcome, record = self._apply(member.id, event_type, now)
        log = SlackAttendanceLog(
            team_member_id=member.id,
            slack_user_id=slack_user_id,
            slack_message_ts=message_ts,
            channel_id=channel_id,
            message_text=text,
            event_type=event_type.value,
            detected_keyword=keyword,
            outcome=outcome.value,
            timestamp=now,
            attendance_id=record.id if record is not None else None,
        )
        self.db.add(log)
        self._commit("Slack message already processed")
        self.db.refresh(log)
        self.log_info(
            f"Slack {event_type.value} for {member.id}: {outcome.value}",
            team_member_id=member.id,
            slack_message_ts=message_ts,
        )

        if outcome in (SlackOutcome.CHECKED_IN, SlackOutcome.CHECKED_OUT) and config.bot_token:
            SlackClient(config.bot_token).add_reaction(channel_id, message_ts, settings.slack.ack_reaction)
        return log

    def _apply(self, team_member_id: str, event_type: SlackEventType, now: datetime):
        day = now.date()
        clock = now.strftime("%H:%M")
        record = self.attendance.find_for_day(team_member_id, day)

        if event_type == SlackEventType.CHECK_IN:
            if record is not None:
                return SlackOutcome.ALREADY_CHECKED_IN, record
            record = self.attendance.upsert_for_day(team_member_id, day, check_in=clock, notes="Checked in via Slack")
            return SlackOutcome.CHECKED_IN, record

        if record is None or not record.check_in:
            self.log_warning(f"Check-out from {team_member_id} without a check-in on {day.isoformat()}")
            return SlackOutcome.NO_CHECK_IN, record
        record = self.attendance.upsert_for_day(team_member_id, day, check_out=clock)
        return SlackOutcome.CHECKED_OUT, record

    def _find_log(self, message_ts: str) -> Optional[SlackAttendanceLog]:
        return self.db.query(SlackAttendanceLog).filter(
            SlackAttendanceLog.slack_message_ts == message_ts
        ).first()
