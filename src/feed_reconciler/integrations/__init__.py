"""Collaborators the engine talks to: bank feed, language model, notifier."""

from feed_reconciler.integrations.csv_feed import AppliedAction, CsvBankFeed
from feed_reconciler.integrations.protocols import LanguageModel, Notifier, PageAutomation
from feed_reconciler.integrations.slack import NullNotifier, SlackWebhookNotifier

__all__ = [
    "AppliedAction",
    "CsvBankFeed",
    "LanguageModel",
    "Notifier",
    "NullNotifier",
    "PageAutomation",
    "SlackWebhookNotifier",
]
