"""
API Tests for the Link Summarizer
=================================

Route-level tests with the summarizer, relay and settings swapped through
FastAPI dependency overrides.
"""

import json
from unittest.mock import MagicMock

import pytest

from link_summarizer.relay import SIGNATURE_HEADER, sign
from link_summarizer.schemas import Reply, SummarizeResult
from link_summarizer.settings import AppSettings, get_settings
from routes.helpers import get_relay, get_summarizer

SECRET = "channel-secret"


@pytest.fixture
def summarizer():
    fake = MagicMock()
    fake.handle.side_effect = lambda url: SummarizeResult.success(url, Reply(main="00:00 - intro", comment=None))
    return fake


@pytest.fixture
def api(client, summarizer):
    relay = MagicMock()
    settings = AppSettings(_env_file=None, line_channel_secret=SECRET, line_channel_access_token="access")
    client.app.dependency_overrides[get_summarizer] = lambda: summarizer
    client.app.dependency_overrides[get_relay] = lambda: relay
    client.app.dependency_overrides[get_settings] = lambda: settings
    client.relay = relay
    return client


class TestHealth:
    def test_health_check(self, api):
        response = api.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["configuration"]["line_configured"] is True
        assert "openai_api_key" not in data["configuration"]


class TestSummarizeEndpoint:
    @pytest.mark.parametrize("path", ["/", "/summarize"])
    def test_success(self, api, summarizer, path):
        response = api.get(path, params={"url": "https://youtu.be/abc"})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "url": "https://youtu.be/abc", "reply": {"main": "00:00 - intro", "comment": None}}
        summarizer.handle.assert_called_once_with("https://youtu.be/abc")

    def test_failure_only_exposes_ok(self, api, summarizer):
        summarizer.handle.side_effect = lambda url: SummarizeResult.failure()

        response = api.get("/", params={"url": "https://example.com/a"})

        assert response.status_code == 200
        assert response.json() == {"ok": False}

    def test_missing_url(self, api, summarizer):
        response = api.get("/summarize")

        assert response.json() == {"ok": False}
        summarizer.handle.assert_not_called()


class TestWebhook:
    def _post(self, api, payload, secret=SECRET):
        body = json.dumps(payload).encode("utf-8")
        return api.post("/webhook", content=body, headers={SIGNATURE_HEADER: sign(body, secret), "content-type": "application/json"})

    def test_valid_signature_dispatches_events(self, api):
        payload = {"events": [{"type": "message", "replyToken": "t", "message": {"type": "text", "text": "https://a.example.com/1"}}]}

        response = self._post(api, payload)

        assert response.json() == {"ok": True}
        api.relay.handle_events.assert_called_once()
        (events,) = api.relay.handle_events.call_args.args
        assert events[0].reply_token == "t"

    def test_bad_signature_is_rejected(self, api):
        response = self._post(api, {"events": []}, secret="wrong")

        assert response.json() == {"ok": False}
        api.relay.handle_events.assert_not_called()

    def test_malformed_payload_is_rejected(self, api):
        body = b"not json"
        response = api.post("/webhook", content=body, headers={SIGNATURE_HEADER: sign(body, SECRET)})

        assert response.json() == {"ok": False}
        api.relay.handle_events.assert_not_called()

    def test_unconfigured_relay_answers_not_ok(self, api):
        api.app.dependency_overrides[get_relay] = lambda: None
        payload = {"events": [{"type": "message", "replyToken": "t", "message": {"type": "text", "text": "https://a.example.com/1"}}]}

        response = self._post(api, payload)

        assert response.status_code == 200
        assert response.json() == {"ok": False}


class TestRelayDependency:
    def test_missing_access_token_disables_relay(self, monkeypatch):
        settings = AppSettings(_env_file=None, line_channel_secret=SECRET)
        monkeypatch.setattr("routes.helpers.get_settings", lambda: settings)
        get_relay.cache_clear()

        try:
            assert get_relay() is None
        finally:
            get_relay.cache_clear()
