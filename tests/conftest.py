"""Shared fixtures: transaction factory and in-memory collaborators."""

from collections.abc import Callable

import pytest

from feed_reconciler.errors import DispatchError
from feed_reconciler.models.decision import Action
from feed_reconciler.models.transaction import BankTransaction


class FakeFeed:
    """In-memory page automation collaborator."""

    def __init__(
        self,
        transactions: list[BankTransaction],
        fail_rows: set[object] | None = None,
        raise_rows: set[object] | None = None,
        read_error: Exception | None = None,
        apply_error: Exception | None = None,
    ):
        self.transactions = transactions
        self.fail_rows = fail_rows or set()
        self.raise_rows = raise_rows or set()
        self.read_error = read_error
        self.apply_error = apply_error
        self.applied: list[tuple[object, str, Action]] = []

    async def read_for_review(self, limit: int) -> list[BankTransaction]:
        if self.read_error is not None:
            raise self.read_error
        return self.transactions[:limit]

    async def apply(self, row_handle: object, category: str, action: Action) -> bool:
        if self.apply_error is not None:
            raise self.apply_error
        if row_handle in self.raise_rows:
            raise DispatchError("Accept button not found", row_handle=row_handle)
        if row_handle in self.fail_rows:
            return False
        self.applied.append((row_handle, category, action))
        return True


class FakeNotifier:
    """Notifier recording every summary it receives."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.sent: list[list[str]] = []

    async def send(self, lines: list[str]) -> None:
        self.sent.append(list(lines))
        if self.error is not None:
            raise self.error


@pytest.fixture
def make_txn() -> Callable[..., BankTransaction]:
    """Factory for bank transactions with sensible defaults."""

    def factory(**overrides: object) -> BankTransaction:
        data: dict[str, object] = {
            "date": "01/15/2025",
            "description": "",
            "payee": "",
            "spent": "",
            "received": "",
            "row_handle": "row-1",
        }
        data.update(overrides)
        return BankTransaction(**data)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def fake_feed_cls() -> type[FakeFeed]:
    return FakeFeed


@pytest.fixture
def fake_notifier_cls() -> type[FakeNotifier]:
    return FakeNotifier
