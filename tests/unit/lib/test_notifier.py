"""Tests for progress and chat notifications."""

from __future__ import annotations

import io
import logging
from unittest.mock import MagicMock

import pytest
import requests

from shipctl.lib.notifier import (
    NullSink,
    Notifier,
    NotifierConfig,
    Severity,
    SlackWebhookSink,
)

pytestmark = pytest.mark.unit

WEBHOOK = "https://hooks.slack.example.com/services/T000/B000/XXXX"


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


class TestSlackWebhookSink:
    """Tests for SlackWebhookSink."""

    def test_payload_uses_severity_color(self) -> None:
        """Slack keywords are used for good/warning/danger."""
        sink = SlackWebhookSink(WEBHOOK, title="prod/api", session=MagicMock())

        payload = sink.build_payload(Severity.DANGER, "failed to rollback\n")

        assert payload == {
            "attachments": [
                {
                    "color": "danger",
                    "text": "failed to rollback",
                    "fallback": "failed to rollback",
                    "title": "prod/api",
                }
            ]
        }

    def test_normal_severity_color(self) -> None:
        """Normal messages use a neutral hex color and omit an empty title."""
        sink = SlackWebhookSink(WEBHOOK, session=MagicMock())

        attachment = sink.build_payload(Severity.NORMAL, "hi")["attachments"][0]

        assert attachment["color"] == "#439FE0"
        assert "title" not in attachment

    def test_send_posts_json(self, session: MagicMock) -> None:
        """Messages are posted as JSON with a timeout."""
        sink = SlackWebhookSink(WEBHOOK, title="prod/api", timeout=2.0, session=session)

        sink.send(Severity.GOOD, "successfully updated")

        session.post.assert_called_once_with(
            WEBHOOK,
            json=sink.build_payload(Severity.GOOD, "successfully updated"),
            timeout=2.0,
        )
        session.post.return_value.raise_for_status.assert_called_once()


class TestNotifier:
    """Tests for Notifier."""

    def test_without_webhook_chat_is_disabled(self) -> None:
        """No webhook means chat messages go nowhere."""
        notifier = Notifier(NotifierConfig("prod", "api"))

        assert notifier.chat_enabled is False
        assert isinstance(notifier._sink, NullSink)
        notifier.chat(Severity.GOOD, "ignored")

    def test_with_webhook_uses_slack(self) -> None:
        """A webhook URL selects the Slack sink at construction."""
        notifier = Notifier(NotifierConfig("prod", "api", webhook_url=WEBHOOK))

        assert notifier.chat_enabled is True
        assert isinstance(notifier._sink, SlackWebhookSink)
        assert notifier._sink.title == "prod/api"

    def test_log_prefixes_cluster_and_service(self) -> None:
        """Progress lines carry the cluster/service prefix."""
        out = io.StringIO()
        notifier = Notifier(NotifierConfig("prod", "api"), out=out)

        notifier.log("service updating\n")

        assert out.getvalue() == "[prod/api] service updating\n"

    def test_chat_accepts_severity_names(self) -> None:
        """Severity may be given by its string value."""
        sink = MagicMock()
        notifier = Notifier(NotifierConfig("prod", "api"), sink=sink)

        notifier.chat("warning", "slow rollout")

        sink.send.assert_called_once_with(Severity.WARNING, "slow rollout")

    def test_chat_failure_is_logged_not_raised(self, caplog) -> None:
        """Webhook errors never escape the notifier."""
        caplog.set_level(logging.WARNING, logger="shipctl")
        sink = MagicMock()
        sink.send.side_effect = requests.HTTPError("500 Server Error")
        notifier = Notifier(NotifierConfig("prod", "api"), sink=sink)

        notifier.chat(Severity.DANGER, "failed")

        assert "Failed to send" in caplog.text

    def test_unknown_severity_is_logged_not_raised(self, caplog) -> None:
        """An unknown severity name is reported as a warning."""
        caplog.set_level(logging.WARNING, logger="shipctl")
        sink = MagicMock()
        notifier = Notifier(NotifierConfig("prod", "api"), sink=sink)

        notifier.chat("critical", "oops")

        sink.send.assert_not_called()
        assert "Failed to send critical chat notification" in caplog.text
