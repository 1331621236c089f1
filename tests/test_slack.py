"""Tests for the Slack webhook notifier."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
import requests

from feed_reconciler.errors import NotificationError
from feed_reconciler.integrations.slack import NullNotifier, SlackWebhookNotifier

WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


class TestSlackWebhookNotifier:
    """Tests for SlackWebhookNotifier."""

    def test_from_env_unset(self) -> None:
        """Test that no notifier is built without a webhook URL."""
        with patch.dict("os.environ", {}, clear=True):
            assert SlackWebhookNotifier.from_env() is None

    def test_from_env_set(self) -> None:
        """Test that the webhook URL is read from the named variable."""
        with patch.dict("os.environ", {"MY_HOOK": WEBHOOK}):
            notifier = SlackWebhookNotifier.from_env("MY_HOOK")
        assert notifier is not None
        assert notifier.webhook_url == WEBHOOK

    @patch("feed_reconciler.integrations.slack.requests.post")
    def test_send_posts_joined_lines(self, mock_post: MagicMock) -> None:
        """Test that summary lines are posted as one newline-joined message."""
        mock_post.return_value = MagicMock(ok=True, status_code=200)

        asyncio.run(SlackWebhookNotifier(WEBHOOK).send(["Loaded 2", "Added 1"]))

        mock_post.assert_called_once_with(
            WEBHOOK, json={"text": "Loaded 2\nAdded 1"}, timeout=10.0
        )

    @patch("feed_reconciler.integrations.slack.requests.post")
    def test_empty_lines_not_sent(self, mock_post: MagicMock) -> None:
        """Test that an empty summary makes no request."""
        asyncio.run(SlackWebhookNotifier(WEBHOOK).send([]))
        mock_post.assert_not_called()

    @patch("feed_reconciler.integrations.slack.requests.post")
    def test_error_status_raises(self, mock_post: MagicMock) -> None:
        """Test that a non-2xx webhook response raises NotificationError."""
        mock_post.return_value = MagicMock(ok=False, status_code=404, text="no_service")
        with pytest.raises(NotificationError, match="404"):
            asyncio.run(SlackWebhookNotifier(WEBHOOK).send(["x"]))

    @patch("feed_reconciler.integrations.slack.requests.post")
    def test_transport_error_raises(self, mock_post: MagicMock) -> None:
        """Test that a connection failure raises NotificationError."""
        mock_post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(NotificationError, match="refused"):
            asyncio.run(SlackWebhookNotifier(WEBHOOK).send(["x"]))


class TestNullNotifier:
    """Tests for NullNotifier."""

    def test_send_is_noop(self) -> None:
        """Test that the null notifier accepts lines without side effects."""
        asyncio.run(NullNotifier().send(["x"]))
