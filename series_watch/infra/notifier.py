"""Notification sinks for delta reports and error alerts."""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx
from rich.console import Console

from ..config import SlackConfig
from ..errors import NotificationError

SLACK_POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"


class Notifier(ABC):
    @abstractmethod
    def send(self, message: str) -> None:
        """Deliver ``message`` or raise ``NotificationError``."""

    def close(self) -> None:
        return None


class SlackNotifier(Notifier):
    """Post plain-text messages through Slack's ``chat.postMessage``."""

    def __init__(self, config: SlackConfig, client: httpx.Client | None = None) -> None:
        self.config = config
        self._client = client or httpx.Client(timeout=config.timeout)

    def send(self, message: str) -> None:
        try:
            response = self._client.request(
                method="POST",
                url=SLACK_POST_MESSAGE_URL,
                headers={"Authorization": f"Bearer {self.config.bot_token}"},
                json={"channel": self.config.channel, "text": message, "mrkdwn": True},
                timeout=self.config.timeout,
            )
        except httpx.HTTPError as exc:
            raise NotificationError(f"failed to reach Slack: {exc}") from exc
        if response.status_code >= 300:
            raise NotificationError(f"Slack responded with status {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise NotificationError("Slack returned a non-JSON response") from exc
        if not payload.get("ok", False):
            raise NotificationError(f"Slack rejected message: {payload.get('error', 'unknown_error')}")

    def close(self) -> None:
        self._client.close()


class ConsoleNotifier(Notifier):
    """Print reports to the terminal instead of delivering them."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.messages: list[str] = []

    def send(self, message: str) -> None:
        self.messages.append(message)
        self.console.print(message, markup=False, highlight=False)


def build_notifier(config: SlackConfig, dry_run: bool = False) -> Notifier:
    if dry_run or not config.enabled:
        return ConsoleNotifier()
    return SlackNotifier(config)


__all__ = ["ConsoleNotifier", "Notifier", "SlackNotifier", "build_notifier"]
