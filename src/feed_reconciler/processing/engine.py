"""Batch driver: rules, AI fallback, normalization, dispatch, summary."""

from feed_reconciler.errors import NotificationError
from feed_reconciler.integrations.protocols import Notifier, PageAutomation
from feed_reconciler.models.decision import CategorizationDecision
from feed_reconciler.models.report import RunState, RunSummary
from feed_reconciler.models.transaction import BankTransaction, TransactionStatus
from feed_reconciler.processing.ai.classifier import AIClassifier
from feed_reconciler.processing.dispatcher import ActionDispatcher
from feed_reconciler.processing.normalizer import normalize
from feed_reconciler.processing.rule_matcher import RuleMatcher
from feed_reconciler.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)

DEFAULT_FEED_LIMIT = 50


class ReconciliationEngine:
    """Processes one "for review" batch end to end.

    Transactions are handled one at a time in feed order, because every
    dispatch mutates the shared page. A failure recovered inside one
    transaction never affects the next one. Anything unrecovered aborts the
    rest of the batch; actions applied before that stay applied.

    The summary is always handed to the notifier, also when the batch
    aborts. Notifier failures are logged and never fail the run.
    """

    def __init__(
        self,
        matcher: RuleMatcher,
        dispatcher: ActionDispatcher,
        classifier: AIClassifier | None = None,
        notifier: Notifier | None = None,
    ):
        """Initialize the engine.

        Args:
            matcher: Rule matcher with the configured rule list.
            dispatcher: Dispatcher wrapping the page automation executor.
            classifier: AI fallback classifier (None disables the fallback).
            notifier: Summary notification collaborator.
        """
        self.matcher = matcher
        self.dispatcher = dispatcher
        self.classifier = classifier
        self.notifier = notifier
        self.state = RunState.IDLE

    async def decide(self, txn: BankTransaction) -> CategorizationDecision | None:
        """Categorize a transaction: rules first, AI only when no rule matches.

        Returns:
            Normalized decision, or None if nothing could decide.
        """
        decision = self.matcher.match(txn)
        if decision is None and self.classifier is not None:
            decision = await self.classifier.classify(txn)
        if decision is None:
            return None
        return normalize(txn, decision)

    async def run(self, feed: PageAutomation, limit: int = DEFAULT_FEED_LIMIT) -> RunSummary:
        """Run one batch against the feed.

        Args:
            feed: Page automation collaborator supplying transactions.
            limit: Maximum number of transactions to read.

        Returns:
            RunSummary of the batch.

        Raises:
            Exception: Any unrecovered error (e.g. SessionError) after the
                summary has been delivered.
        """
        self.dispatcher.reset()
        summary = RunSummary(
            counters=self.dispatcher.counters,
            dry_run=self.dispatcher.dry_run,
        )

        try:
            with LogContext(logger, "reconciliation run", limit=limit, dry_run=summary.dry_run):
                transactions = await feed.read_for_review(limit)
                summary.loaded = len(transactions)
                self.state = summary.state = RunState.PROCESSING

                for index, txn in enumerate(transactions):
                    if txn.status is not TransactionStatus.FOR_REVIEW:
                        logger.debug(f"Skipping row {index} with status {txn.status.value}")
                        summary.counters.skipped_status += 1
                        continue

                    decision = await self.decide(txn)
                    result = await self.dispatcher.dispatch(txn, decision)
                    summary.results.append(result)

                self.state = summary.state = RunState.DONE
                logger.info(" | ".join(summary.to_lines()))
        except Exception as e:
            self.state = summary.state = RunState.ABORTED
            summary.error = f"{type(e).__name__}: {e}"
            raise
        finally:
            await self._notify(summary)

        return summary

    async def _notify(self, summary: RunSummary) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.send(summary.to_lines())
        except NotificationError as e:
            logger.warning(f"Failed to deliver run summary: {e}")
        except Exception as e:
            logger.warning(f"Notifier raised unexpectedly: {e}", exc_info=True)
