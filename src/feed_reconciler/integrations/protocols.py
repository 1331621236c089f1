"""Structural interfaces for the collaborators the engine drives."""

from typing import Protocol

from feed_reconciler.models.decision import Action
from feed_reconciler.models.transaction import BankTransaction


class PageAutomation(Protocol):
    """Bank feed page: supplies the "for review" queue and applies actions.

    ``read_for_review`` returns at most ``limit`` rows that are still for
    review, in feed order. ``apply`` returns False when the page rejected
    the action, raises DispatchError for a row-level failure and
    SessionError when the session itself is gone.
    """

    async def read_for_review(self, limit: int) -> list[BankTransaction]: ...

    async def apply(self, row_handle: object, category: str, action: Action) -> bool: ...


class LanguageModel(Protocol):
    """Text completion backend used by the AI classifier."""

    async def complete(self, prompt: str) -> str: ...


class Notifier(Protocol):
    """Delivery channel for run summary lines."""

    async def send(self, lines: list[str]) -> None: ...
