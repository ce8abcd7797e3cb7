"""Progress and result notifications for shipctl commands.

A ``Notifier`` writes plain-text progress lines to a stream and, separately,
posts short severity-tagged messages to a chat webhook. Notification failures
are logged and never raised.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TextIO

import click
import requests
from requests.exceptions import RequestException

from shipctl.lib.logging_config import get_logger

logger = get_logger(__name__)


class Severity(str, Enum):
    """Chat message severity."""

    NORMAL = "normal"
    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


# Slack attachment colors; "good", "warning" and "danger" are Slack keywords
SEVERITY_COLORS: dict[Severity, str] = {
    Severity.NORMAL: "#439FE0",
    Severity.GOOD: "good",
    Severity.WARNING: "warning",
    Severity.DANGER: "danger",
}


@dataclass(frozen=True)
class NotifierConfig:
    """Notifier settings for one cluster/service invocation."""

    cluster: str
    service_name: str
    webhook_url: str | None = None


class ChatSink(Protocol):
    """Destination for chat messages."""

    def send(self, severity: Severity, text: str) -> None:
        """Deliver one message. May raise on delivery failure."""
        ...


class NullSink:
    """Chat sink used when no webhook is configured."""

    def send(self, severity: Severity, text: str) -> None:
        return None


class SlackWebhookSink:
    """Post messages to a Slack incoming webhook."""

    DEFAULT_TIMEOUT = 5.0  # seconds

    def __init__(
        self,
        webhook_url: str,
        title: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the sink.

        Args:
            webhook_url: Slack incoming webhook URL
            title: Attachment title, usually ``<cluster>/<service>``
            timeout: Request timeout in seconds
            session: HTTP session to reuse
        """
        self.webhook_url = webhook_url
        self.title = title
        self.timeout = timeout
        self._session = session or requests.Session()

    def build_payload(self, severity: Severity, text: str) -> dict[str, Any]:
        """Build the webhook JSON body for a message."""
        attachment: dict[str, Any] = {
            "color": SEVERITY_COLORS.get(severity, SEVERITY_COLORS[Severity.NORMAL]),
            "text": text.strip(),
            "fallback": text.strip(),
        }
        if self.title:
            attachment["title"] = self.title
        return {"attachments": [attachment]}

    def send(self, severity: Severity, text: str) -> None:
        response = self._session.post(
            self.webhook_url,
            json=self.build_payload(severity, text),
            timeout=self.timeout,
        )
        response.raise_for_status()


class Notifier:
    """Best-effort progress reporting for one cluster/service.

    The chat sink is chosen once, at construction: a Slack webhook sink when
    ``config.webhook_url`` is set, a no-op sink otherwise.
    """

    def __init__(
        self,
        config: NotifierConfig,
        out: TextIO | None = None,
        sink: ChatSink | None = None,
    ) -> None:
        self.config = config
        self._out = out
        if sink is not None:
            self._sink: ChatSink = sink
        elif config.webhook_url:
            self._sink = SlackWebhookSink(
                config.webhook_url, title=f"{config.cluster}/{config.service_name}"
            )
        else:
            self._sink = NullSink()

    @property
    def chat_enabled(self) -> bool:
        """Whether chat messages are delivered anywhere."""
        return not isinstance(self._sink, NullSink)

    def log(self, message: str) -> None:
        """Write a progress line prefixed with the cluster and service."""
        line = f"[{self.config.cluster}/{self.config.service_name}] {message.rstrip()}"
        logger.info(line)
        try:
            click.echo(line, file=self._out or sys.stdout)
        except OSError as exc:
            logger.warning(f"Failed to write progress message: {exc}")

    def chat(self, severity: Severity | str, message: str) -> None:
        """Send a message to the chat channel, if one is configured."""
        try:
            self._sink.send(Severity(severity), message)
        except (RequestException, ValueError) as exc:
            logger.warning(f"Failed to send {severity} chat notification: {exc}")
