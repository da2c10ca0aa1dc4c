import hmac
import time
import hashlib
import logging
from typing import Any, Dict, List, Optional

import requests

from agency_hr.core.config import settings

logger = logging.getLogger(__name__)


def verify_request(
    signing_secret: str,
    signature: Optional[str],
    timestamp: Optional[str],
    raw_body: bytes,
    now: Optional[float] = None,
) -> bool:
    """
    Check Slack's ``X-Slack-Signature`` header.

    The signature is ``v0=`` + hex HMAC-SHA256 of ``v0:{timestamp}:{body}``
    keyed by the signing secret. Requests older than the replay window, or
    with a malformed timestamp, are rejected before hashing.
    """
    if not signing_secret or not signature or not timestamp:
        return False
    try:
        sent_at = int(timestamp)
    except ValueError:
        return False

    current = int(now if now is not None else time.time())
    if current - sent_at > settings.slack.request_max_age_seconds:
        logger.warning("Slack request too old, possible replay attack")
        return False

    if isinstance(raw_body, bytes):
        raw_body = raw_body.decode("utf-8")
    base_string = f"v0:{timestamp}:{raw_body}"
    expected = "v0=" + hmac.new(
        signing_secret.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


class SlackClient:
    """Thin wrapper over the handful of Slack Web API methods the bot uses."""

    def __init__(self, bot_token: Optional[str], base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.bot_token = bot_token
        self.base_url = (base_url or settings.slack.api_base_url).rstrip("/")
        self.timeout = timeout or settings.slack.api_timeout_seconds

    def _call(self, method: str, http_method: str = "GET", **kwargs) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.bot_token}",
            "Content-Type": "application/json; charset=utf-8",
        }
        response = requests.request(
            http_method,
            f"{self.base_url}/{method}",
            headers=headers,
            timeout=self.timeout,
            **kwargs,
        )
        response.raise_for_status()
        return response.json()

    def test_connection(self) -> Dict[str, Any]:
        try:
            data = self._call("auth.test")
        except requests.RequestException as e:
            logger.warning(f"Slack auth.test failed: {e}")
            return {"ok": False, "error": "Failed to connect to Slack API"}
        if data.get("ok"):
            return {"ok": True, "team_name": data.get("team"), "team_id": data.get("team_id")}
        return {"ok": False, "error": data.get("error")}

    def fetch_users(self) -> List[Dict[str, Any]]:
        """Workspace members, without bots and deactivated accounts."""
        try:
            data = self._call("users.list")
        except requests.RequestException as e:
            logger.error(f"Error fetching Slack users: {e}")
            return []
        if not data.get("ok"):
            logger.error(f"Failed to fetch Slack users: {data.get('error')}")
            return []
        return [
            member for member in data.get("members", [])
            if not member.get("is_bot") and not member.get("deleted")
        ]

    def fetch_channels(self) -> List[Dict[str, Any]]:
        try:
            data = self._call("conversations.list", params={"types": "public_channel,private_channel"})
        except requests.RequestException as e:
            logger.error(f"Error fetching Slack channels: {e}")
            return []
        if not data.get("ok"):
            logger.error(f"Failed to fetch Slack channels: {data.get('error')}")
            return []
        return data.get("channels", [])

    def send_message(self, channel_id: str, text: str) -> bool:
        return self._post("chat.postMessage", {"channel": channel_id, "text": text})

    def add_reaction(self, channel_id: str, message_ts: str, reaction: str) -> bool:
        return self._post("reactions.add", {"channel": channel_id, "timestamp": message_ts, "name": reaction})

    def _post(self, method: str, payload: Dict[str, Any]) -> bool:
        # Fire-and-forget: failures are logged, never raised
        try:
            data = self._call(method, http_method="POST", json=payload)
        except requests.RequestException as e:
            logger.warning(f"Slack {method} failed: {e}")
            return False
        if not data.get("ok"):
            logger.warning(f"Slack {method} returned error: {data.get('error')}")
        return bool(data.get("ok"))
