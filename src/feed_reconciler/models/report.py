"""Run-level result models."""

from dataclasses import dataclass, field
from enum import Enum

from feed_reconciler.models.decision import Action, CategorizationDecision


class DispatchOutcome(Enum):
    """What happened to a single transaction."""

    EXECUTED_ADD = "executed_add"
    EXECUTED_MATCH = "executed_match"
    SKIPPED = "skipped"

    @property
    def executed(self) -> bool:
        return self is not DispatchOutcome.SKIPPED

    @classmethod
    def for_action(cls, action: Action) -> "DispatchOutcome":
        if action is Action.ADD:
            return cls.EXECUTED_ADD
        if action is Action.MATCH:
            return cls.EXECUTED_MATCH
        return cls.SKIPPED


class ConfidenceTier(Enum):
    """Execution tier a decision's confidence falls into."""

    PRIMARY = "primary"
    FALLBACK = "fallback"
    BELOW_THRESHOLD = "below_threshold"


class RunState(Enum):
    """Batch state machine."""

    IDLE = "idle"
    PROCESSING = "processing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class DispatchResult:
    """Result of dispatching one transaction.

    Attributes:
        outcome: Executed add/match, or skipped.
        decision: The normalized decision (None if nothing could decide).
        tier: Confidence tier of the decision.
        reason: Why the transaction was skipped, if it was.
        failed: True when execution was attempted but the collaborator
            reported failure.
    """

    outcome: DispatchOutcome
    decision: CategorizationDecision | None = None
    tier: ConfidenceTier | None = None
    reason: str | None = None
    failed: bool = False


@dataclass
class RunCounters:
    """Counters accumulated across one batch.

    Attributes:
        processed: Transactions taken through classification and dispatch.
        added: Rows executed with the add action.
        matched: Rows executed with the match action.
        marked_for_review: Rows left for a human.
        failed: Rows where execution was attempted and failed.
        skipped_status: Rows ignored because they were not "for review".
    """

    processed: int = 0
    added: int = 0
    matched: int = 0
    marked_for_review: int = 0
    failed: int = 0
    skipped_status: int = 0

    def record(self, result: DispatchResult) -> None:
        """Fold one dispatch result into the counters."""
        self.processed += 1
        if result.outcome is DispatchOutcome.EXECUTED_ADD:
            self.added += 1
        elif result.outcome is DispatchOutcome.EXECUTED_MATCH:
            self.matched += 1
        elif result.failed:
            self.failed += 1
        else:
            self.marked_for_review += 1


@dataclass
class RunSummary:
    """Summary of a reconciliation batch.

    Attributes:
        loaded: Number of transactions read from the feed.
        counters: Accumulated counters.
        results: Per-transaction dispatch results in feed order.
        state: Final state of the batch state machine.
        error: Error message when the batch aborted.
        dry_run: Whether actions were simulated.
    """

    loaded: int = 0
    counters: RunCounters = field(default_factory=RunCounters)
    results: list[DispatchResult] = field(default_factory=list)
    state: RunState = RunState.IDLE
    error: str | None = None
    dry_run: bool = False

    def to_lines(self) -> list[str]:
        """Human-readable summary lines for the notifier."""
        suffix = " (simulated)" if self.dry_run else ""
        lines = [f"Loaded {self.loaded} transactions For review"]
        if self.counters.skipped_status:
            lines.append(f"Ignored {self.counters.skipped_status} rows not For review")
        lines.append(f"Added{suffix} {self.counters.added}")
        lines.append(f"Matched{suffix} {self.counters.matched}")
        lines.append(f"Marked for review {self.counters.marked_for_review}")
        if self.counters.failed:
            lines.append(f"Failed to apply {self.counters.failed}")
        if self.state is RunState.ABORTED:
            lines.append(f"Run aborted after {self.counters.processed} transactions: {self.error}")
        return lines
