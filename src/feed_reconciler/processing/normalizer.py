"""Reconciles a decision's action with the transaction's direction."""

from dataclasses import replace

from feed_reconciler.models.decision import Action, CategorizationDecision
from feed_reconciler.models.transaction import BankTransaction
from feed_reconciler.utils.decimal_utils import ZERO
from feed_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)


def normalize(txn: BankTransaction, decision: CategorizationDecision) -> CategorizationDecision:
    """Force the action implied by the transaction direction.

    "add" and "match" are mutually exclusive remediation paths selected by
    direction alone:

    - received > 0: action is always MATCH, even over an explicit action.
    - spent > 0 and no explicit action upstream: action becomes ADD.

    Category, confidence, and reason pass through unchanged. The input
    decision is not mutated.

    Args:
        txn: Transaction the decision belongs to.
        decision: Raw decision from the rule matcher or AI classifier.

    Returns:
        Normalized decision.
    """
    if txn.received_amount > ZERO:
        target = Action.MATCH
    elif txn.spent_amount > ZERO and not decision.explicit_action:
        target = Action.ADD
    else:
        return decision

    if decision.action is target:
        return decision

    logger.debug(
        f"Normalized action for {txn.description[:40]!r}: "
        f"{decision.action.value} -> {target.value}"
    )
    return replace(decision, action=target)


class DecisionNormalizer:
    """Callable wrapper around normalize() for the processing pipeline."""

    def normalize(
        self, txn: BankTransaction, decision: CategorizationDecision
    ) -> CategorizationDecision:
        return normalize(txn, decision)
