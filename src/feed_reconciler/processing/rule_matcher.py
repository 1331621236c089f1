"""Deterministic rule-based transaction categorization."""

from collections.abc import Sequence

from feed_reconciler.models.decision import Action, CategorizationDecision, DecisionSource
from feed_reconciler.models.rule import Rule, all_of, amount_above, amount_below, contains_any
from feed_reconciler.models.transaction import BankTransaction
from feed_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_RULE_CONFIDENCE = 0.8
DEFAULT_RULE_ACTION = Action.MARK_FOR_REVIEW


def match(txn: BankTransaction, rules: Sequence[Rule]) -> CategorizationDecision | None:
    """Return the decision of the first rule that matches the transaction.

    Rules are evaluated strictly in the given order; a later rule is never
    consulted once an earlier one matches. Pure function.

    Args:
        txn: Transaction to categorize.
        rules: Ordered rules.

    Returns:
        CategorizationDecision for the first matching rule, or None.
    """
    for rule in rules:
        if rule.matches(txn):
            return CategorizationDecision(
                category=rule.category,
                confidence=(
                    rule.confidence if rule.confidence is not None else DEFAULT_RULE_CONFIDENCE
                ),
                action=rule.action if rule.action is not None else DEFAULT_RULE_ACTION,
                reason=rule.name,
                source=DecisionSource.RULE,
                explicit_action=rule.action is not None,
            )
    return None


class RuleMatcher:
    """Matches transactions against an explicit, ordered rule list."""

    def __init__(self, rules: Sequence[Rule]):
        """Initialize the matcher.

        Args:
            rules: Rules in evaluation order. Copied into a tuple so later
                changes to the caller's list cannot affect this matcher.
        """
        self.rules: tuple[Rule, ...] = tuple(rules)

    def match(self, txn: BankTransaction) -> CategorizationDecision | None:
        """Categorize a transaction by rules.

        Args:
            txn: Transaction to categorize.

        Returns:
            Decision of the first matching rule, or None.
        """
        decision = match(txn, self.rules)
        if decision:
            logger.debug(
                f"Rule '{decision.reason}' matched {txn.description[:40]!r}: "
                f"{decision.category} (confidence: {decision.confidence:.2f})"
            )
        return decision

    def __len__(self) -> int:
        return len(self.rules)


def default_rules() -> list[Rule]:
    """Build the stock rule set.

    Vendor rules are evaluated first, then amount rules, then generic
    description keywords. A new list is returned on every call.
    """
    return [
        # Vendor/payee rules
        Rule("Amazon -> Office Supplies", contains_any("amazon"),
             "Office Supplies", 0.9, Action.ADD),
        Rule("Facebook Ads -> Advertising", contains_any("facebook ads", "meta ads"),
             "Advertising", 0.9, Action.ADD),
        Rule("Stripe Fees -> Bank Charges", contains_any("stripe fee", "stripe payout fee"),
             "Bank Charges", 0.95, Action.ADD),
        Rule("Google Ads -> Advertising", contains_any("google ads", "google adwords"),
             "Advertising", 0.9, Action.ADD),
        Rule("PayPal -> Bank Charges", contains_any("paypal"),
             "Bank Charges", 0.8, Action.ADD),
        Rule("Office Depot -> Office Supplies", contains_any("office depot"),
             "Office Supplies", 0.9, Action.ADD),
        Rule("Staples -> Office Supplies", contains_any("staples"),
             "Office Supplies", 0.9, Action.ADD),
        # Amount rules
        Rule("Large Expense -> Review", amount_above(1000),
             "Review Required", 0.7, Action.MARK_FOR_REVIEW),
        Rule("Small Expense -> Office Supplies",
             all_of(amount_below(50), contains_any("supplies")),
             "Office Supplies", 0.8, Action.ADD),
        # Description patterns
        Rule("Software Subscriptions -> Software", contains_any("subscription", "software"),
             "Software", 0.85, Action.ADD),
        Rule("Travel Expenses -> Travel", contains_any("travel", "hotel", "flight"),
             "Travel", 0.9, Action.ADD),
        Rule("Meals -> Meals & Entertainment", contains_any("restaurant", "food", "meal"),
             "Meals & Entertainment", 0.8, Action.ADD),
    ]
