import json
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from agency_hr.core.exceptions import AuthenticationError
from agency_hr.core.limiter import WEBHOOK_RATE_LIMIT, limiter
from agency_hr.database import get_db
from agency_hr.models.slack import SlackEventType
from agency_hr.schemas.slack import (
    SlackAttendanceLogResponse,
    SlackChannelResponse,
    SlackConnectionResult,
    SlackConnectionTest,
    SlackSettingsCreate,
    SlackSettingsResponse,
    SlackSettingsUpdate,
    SlackUserResponse,
)
from agency_hr.services.slack_attendance import SlackAttendanceBridge, SlackSettingsService
from agency_hr.services.slack_client import verify_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/slack")


# --- Settings ---

@router.get("/settings", response_model=Optional[SlackSettingsResponse])
def get_slack_settings(db: Session = Depends(get_db)):
    service = SlackSettingsService(db)
    row = service.get_settings()
    return service.to_response(row) if row else None


@router.post("/settings", response_model=SlackSettingsResponse, status_code=201)
def save_slack_settings(data: SlackSettingsCreate, db: Session = Depends(get_db)):
    service = SlackSettingsService(db)
    return service.to_response(service.save_settings(data))


@router.put("/settings/{settings_id}", response_model=SlackSettingsResponse)
def update_slack_settings(settings_id: str, data: SlackSettingsUpdate, db: Session = Depends(get_db)):
    service = SlackSettingsService(db)
    return service.to_response(service.update_settings(settings_id, data))


@router.delete("/settings")
def delete_slack_settings(db: Session = Depends(get_db)):
    SlackSettingsService(db).delete_settings()
    return {"success": True}


# --- Workspace lookups ---

@router.post("/test-connection", response_model=SlackConnectionResult)
def test_slack_connection(data: SlackConnectionTest, db: Session = Depends(get_db)):
    return SlackSettingsService(db).test_connection(data.bot_token)


@router.get("/channels", response_model=List[SlackChannelResponse])
def list_slack_channels(db: Session = Depends(get_db)):
    channels = SlackSettingsService(db).client().fetch_channels()
    return [SlackChannelResponse(id=c["id"], name=c.get("name", "")) for c in channels]


@router.get("/users", response_model=List[SlackUserResponse])
def list_slack_users(db: Session = Depends(get_db)):
    users = SlackSettingsService(db).client().fetch_users()
    return [
        SlackUserResponse(
            id=u["id"],
            name=u.get("name", ""),
            real_name=u.get("real_name"),
            email=(u.get("profile") or {}).get("email"),
        )
        for u in users
    ]


@router.get("/logs", response_model=List[SlackAttendanceLogResponse])
def list_slack_attendance_logs(
    team_member_id: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    event_type: Optional[SlackEventType] = None,
    db: Session = Depends(get_db),
):
    return SlackAttendanceBridge(db).list_logs(
        team_member_id=team_member_id,
        from_date=from_date,
        to_date=to_date,
        event_type=event_type.value if event_type else None,
    )


# --- Events webhook ---

@router.post("/events")
@limiter.limit(WEBHOOK_RATE_LIMIT)
async def slack_events(request: Request, db: Session = Depends(get_db)):
    """
    Slack Events API endpoint. The signature is checked against the raw
    body before anything else; after that the request is always acked,
    whatever happens while applying the event.
    """
    raw_body = await request.body()
    bridge = SlackAttendanceBridge(db)
    config = await run_in_threadpool(bridge.slack_settings.effective_config)
    if not config.signing_secret:
        logger.warning("Slack signing secret not configured, event ignored")
        return {"ok": True}

    if not verify_request(
        config.signing_secret,
        request.headers.get("X-Slack-Signature"),
        request.headers.get("X-Slack-Request-Timestamp"),
        raw_body,
    ):
        logger.warning("Rejected Slack event with invalid signature")
        raise AuthenticationError("Invalid Slack request signature")

    try:
        payload = json.loads(raw_body)
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        logger.warning("Slack event body is not a JSON object")
        return {"ok": True}

    if payload.get("type") == "url_verification":
        return {"challenge": payload.get("challenge")}
    if payload.get("type") == "event_callback":
        await run_in_threadpool(bridge.handle_event, payload)
    return {"ok": True}
