import pytest
import requests

from agency_hr.services.slack_client import SlackClient


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


@pytest.fixture
def slack_api(monkeypatch):
    """Route Slack Web API calls to canned payloads keyed by method name."""
    calls = []
    payloads = {}

    def fake_request(http_method, url, headers=None, timeout=None, **kwargs):
        method = url.rsplit("/", 1)[-1]
        calls.append((http_method, method, kwargs, headers))
        result = payloads.get(method, {"ok": True})
        if isinstance(result, Exception):
            raise result
        return FakeResponse(result)

    monkeypatch.setattr("agency_hr.services.slack_client.requests.request", fake_request)
    return calls, payloads


def test_send_message_posts_json(slack_api):
    calls, _ = slack_api
    assert SlackClient("xoxb-1").send_message("C1", "hello") is True

    http_method, method, kwargs, headers = calls[0]
    assert (http_method, method) == ("POST", "chat.postMessage")
    assert kwargs["json"] == {"channel": "C1", "text": "hello"}
    assert headers["Authorization"] == "Bearer xoxb-1"


def test_add_reaction_failure_is_not_raised(slack_api):
    _, payloads = slack_api
    payloads["reactions.add"] = requests.ConnectionError("boom")
    assert SlackClient("xoxb-1").add_reaction("C1", "1.1", "white_check_mark") is False

    payloads["reactions.add"] = {"ok": False, "error": "already_reacted"}
    assert SlackClient("xoxb-1").add_reaction("C1", "1.1", "white_check_mark") is False


def test_fetch_users_skips_bots_and_deleted(slack_api):
    _, payloads = slack_api
    payloads["users.list"] = {"ok": True, "members": [
        {"id": "U1", "name": "ada"},
        {"id": "B1", "name": "bot", "is_bot": True},
        {"id": "U2", "name": "gone", "deleted": True},
    ]}
    assert [u["id"] for u in SlackClient("xoxb-1").fetch_users()] == ["U1"]


def test_test_connection(slack_api):
    _, payloads = slack_api
    payloads["auth.test"] = {"ok": True, "team": "Agency", "team_id": "T1"}
    assert SlackClient("xoxb-1").test_connection() == {"ok": True, "team_name": "Agency", "team_id": "T1"}

    payloads["auth.test"] = {"ok": False, "error": "invalid_auth"}
    assert SlackClient("xoxb-1").test_connection() == {"ok": False, "error": "invalid_auth"}


def test_channels_endpoint_requires_token(client):
    response = client.get("/api/slack/channels")
    assert response.status_code == 422
    assert response.json()["errors"][0]["code"] == "BUSINESS_ERROR"
