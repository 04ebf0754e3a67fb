"""
Tests for alerts/sink.py and alerts/telegram_alerter.py.
"""

import pytest
from unittest.mock import MagicMock, patch

from alerts.sink import ALERT_EVENT, LogAlertSink, MemoryAlertSink, build_sink, dispatch
from alerts.telegram_alerter import TelegramAlertSink
from core.structured_log import read_recent_logs
from monitor.evaluator import EvaluationResult, evaluate
from monitor.sample import AlertPayload, SupplySample


@pytest.fixture
def triggered(token):
    return evaluate([
        SupplySample(token, 1200, 100).encode(),
        SupplySample(token, 1000, 100).encode(),
    ])


class TestDispatch:
    def test_forwards_triggered_payload(self, triggered, token):
        sink = MemoryAlertSink()
        alert = dispatch(triggered, sink)

        assert alert == AlertPayload(token, 1000, 1200)
        assert sink.alerts == [alert]
        assert len(sink) == 1

    def test_ignores_untriggered(self):
        sink = MemoryAlertSink()
        assert dispatch(EvaluationResult(False, None), sink) is None
        assert sink.alerts == []


class TestLogAlertSink:
    def test_writes_structured_event(self, token):
        payload = AlertPayload(token, 1000, 1200)
        LogAlertSink().emit(payload)

        (entry,) = read_recent_logs(level="CRITICAL")
        assert entry["event"] == ALERT_EVENT
        assert entry["token"] == token
        assert entry["old_supply"] == "1000"
        assert entry["new_supply"] == "1200"
        assert entry["encoded"] == payload.hex()


class TestBuildSink:
    def test_known_sinks(self):
        assert isinstance(build_sink("log"), LogAlertSink)
        assert isinstance(build_sink("memory"), MemoryAlertSink)
        assert isinstance(build_sink("telegram"), TelegramAlertSink)

    def test_unknown_sink(self):
        with pytest.raises(ValueError):
            build_sink("pager")


class TestTelegramAlertSink:
    def test_disabled_by_default(self):
        sink = TelegramAlertSink(bot_token="t", chat_id="c")
        assert sink.enabled is False
        assert sink.send_message("hi") is False

    def test_enabled_without_credentials_disables(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_ALERTS_ENABLED", "true")
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        monkeypatch.delenv("TELEGRAM_CHAT_ID", raising=False)
        assert TelegramAlertSink().enabled is False

    def test_emit_posts_and_logs(self, monkeypatch, token):
        monkeypatch.setenv("TELEGRAM_ALERTS_ENABLED", "true")
        sink = TelegramAlertSink(bot_token="abc", chat_id="42")
        response = MagicMock()
        response.json.return_value = {"ok": True}

        with patch("alerts.telegram_alerter.requests.post", return_value=response) as post:
            sink.emit(AlertPayload(token, 1000, 1200))

        url = post.call_args.args[0]
        assert url == "https://api.telegram.org/botabc/sendMessage"
        assert post.call_args.kwargs["data"]["chat_id"] == "42"
        assert "Increase: 200" in post.call_args.kwargs["data"]["text"]
        assert read_recent_logs(level="CRITICAL")[-1]["event"] == ALERT_EVENT

    def test_send_failure_returns_false(self, monkeypatch):
        import requests

        monkeypatch.setenv("TELEGRAM_ALERTS_ENABLED", "true")
        sink = TelegramAlertSink(bot_token="abc", chat_id="42")
        with patch(
            "alerts.telegram_alerter.requests.post",
            side_effect=requests.ConnectionError("offline"),
        ):
            assert sink.send_message("hi") is False
