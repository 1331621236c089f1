"""Confidence-gated execution of categorization decisions."""

from feed_reconciler.errors import DispatchError
from feed_reconciler.integrations.protocols import PageAutomation
from feed_reconciler.models.decision import CategorizationDecision
from feed_reconciler.models.report import (
    ConfidenceTier,
    DispatchOutcome,
    DispatchResult,
    RunCounters,
)
from feed_reconciler.models.transaction import BankTransaction
from feed_reconciler.processing.policy import DispatchPolicy
from feed_reconciler.utils.decimal_utils import format_currency
from feed_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)


class ActionDispatcher:
    """Applies normalized decisions through the page automation collaborator.

    An action is executed only when the transaction has a row handle, the
    action is add or match, and the confidence reaches the fallback tier.
    Everything else is left for manual review. Executor failures are logged
    and counted; they never abort the batch. Failed rows are not retried.
    """

    def __init__(
        self,
        executor: PageAutomation,
        policy: DispatchPolicy | None = None,
        dry_run: bool = False,
    ):
        """Initialize the dispatcher.

        Args:
            executor: Collaborator that applies actions to feed rows.
            policy: Confidence tiers (defaults to 0.9 / 0.7).
            dry_run: Log the would-be actions instead of applying them.
        """
        self.executor = executor
        self.policy = policy or DispatchPolicy()
        self.dry_run = dry_run
        self.counters = RunCounters()

    def reset(self) -> None:
        """Start a fresh set of counters for a new batch."""
        self.counters = RunCounters()

    async def dispatch(
        self,
        txn: BankTransaction,
        decision: CategorizationDecision | None,
    ) -> DispatchResult:
        """Decide whether to execute a decision, execute it, and count it.

        Args:
            txn: Transaction being processed.
            decision: Normalized decision, or None if nothing decided.

        Returns:
            DispatchResult describing the outcome.
        """
        result = await self._dispatch(txn, decision)
        self.counters.record(result)
        return result

    async def _dispatch(
        self,
        txn: BankTransaction,
        decision: CategorizationDecision | None,
    ) -> DispatchResult:
        if decision is None:
            logger.info(f"No decision for {txn.description[:40]!r}, leaving for review")
            return DispatchResult(DispatchOutcome.SKIPPED, reason="no decision")

        tier = self.policy.tier_for(decision.confidence)

        if not decision.action.is_executable:
            logger.info(
                f"Marked for review: {txn.description[:40]!r} -> {decision.category} "
                f"({decision.reason})"
            )
            return DispatchResult(
                DispatchOutcome.SKIPPED, decision, tier, reason="marked for review"
            )

        if tier is ConfidenceTier.BELOW_THRESHOLD:
            logger.info(
                f"Confidence {decision.confidence:.2f} below "
                f"{self.policy.fallback_threshold:.2f} for {txn.description[:40]!r}, "
                "leaving for review"
            )
            return DispatchResult(
                DispatchOutcome.SKIPPED, decision, tier, reason="low confidence"
            )

        if txn.row_handle is None:
            logger.info(f"No row handle for {txn.description[:40]!r}, leaving for review")
            return DispatchResult(
                DispatchOutcome.SKIPPED, decision, tier, reason="no row handle"
            )

        outcome = DispatchOutcome.for_action(decision.action)

        if self.dry_run:
            logger.info(
                f"[dry-run] Would {decision.action.value} {txn.description[:40]!r} as "
                f"{decision.category} ({tier.value} tier, confidence {decision.confidence:.2f})"
            )
            return DispatchResult(outcome, decision, tier)

        try:
            applied = await self.executor.apply(txn.row_handle, decision.category, decision.action)
        except DispatchError as e:
            logger.warning(f"Failed to {decision.action.value} row {txn.row_handle!r}: {e}")
            return DispatchResult(
                DispatchOutcome.SKIPPED, decision, tier, reason=str(e), failed=True
            )

        if not applied:
            logger.warning(
                f"Executor rejected {decision.action.value} for row {txn.row_handle!r}"
            )
            return DispatchResult(
                DispatchOutcome.SKIPPED, decision, tier, reason="executor rejected", failed=True
            )

        logger.info(
            f"Applied {decision.action.value} to {txn.description[:40]!r} "
            f"({format_currency(txn.absolute_amount)}) as {decision.category} "
            f"({tier.value} tier, confidence {decision.confidence:.2f})"
        )
        return DispatchResult(outcome, decision, tier)
