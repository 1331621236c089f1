"""Run summary delivery to a Slack incoming webhook."""

import asyncio
import os

import requests

from feed_reconciler.errors import NotificationError
from feed_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_WEBHOOK_ENV = "SLACK_WEBHOOK_URL"


class SlackWebhookNotifier:
    """Posts summary lines as a single Slack message."""

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    @classmethod
    def from_env(cls, env_var: str = DEFAULT_WEBHOOK_ENV) -> "SlackWebhookNotifier | None":
        """Create a notifier from an environment variable, or None if unset."""
        url = os.environ.get(env_var, "").strip()
        if not url:
            return None
        return cls(url)

    async def send(self, lines: list[str]) -> None:
        """Send the lines, joined by newlines.

        Raises:
            NotificationError: On transport errors or a non-2xx response.
        """
        if not lines:
            return
        payload = {"text": "\n".join(lines)}
        await asyncio.to_thread(self._post, payload)
        logger.info(f"Sent {len(lines)} summary lines to Slack")

    def _post(self, payload: dict[str, str]) -> None:
        try:
            response = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(f"Slack webhook request failed: {e}") from e
        if not response.ok:
            raise NotificationError(
                f"Slack webhook returned {response.status_code}: {response.text[:200]}"
            )


class NullNotifier:
    """Notifier used when no delivery channel is configured."""

    async def send(self, lines: list[str]) -> None:
        logger.debug(f"No notifier configured, dropping {len(lines)} summary lines")
