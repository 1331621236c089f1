"""Data models for bank feed transactions, decisions, rules, and run results."""

from feed_reconciler.models.decision import (
    Action,
    CategorizationDecision,
    DecisionSource,
    clamp_confidence,
)
from feed_reconciler.models.report import (
    ConfidenceTier,
    DispatchOutcome,
    DispatchResult,
    RunCounters,
    RunState,
    RunSummary,
)
from feed_reconciler.models.rule import Rule
from feed_reconciler.models.transaction import (
    BankTransaction,
    TransactionSide,
    TransactionStatus,
)

__all__ = [
    "Action",
    "BankTransaction",
    "CategorizationDecision",
    "ConfidenceTier",
    "DecisionSource",
    "DispatchOutcome",
    "DispatchResult",
    "Rule",
    "RunCounters",
    "RunState",
    "RunSummary",
    "TransactionSide",
    "TransactionStatus",
    "clamp_confidence",
]
