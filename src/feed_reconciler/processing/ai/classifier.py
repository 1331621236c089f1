"""AI fallback classifier for transactions no rule matched."""

from feed_reconciler.integrations.protocols import LanguageModel
from feed_reconciler.models.decision import (
    Action,
    CategorizationDecision,
    DecisionSource,
    clamp_confidence,
)
from feed_reconciler.models.transaction import BankTransaction, TransactionSide
from feed_reconciler.processing.ai.client import parse_json_response
from feed_reconciler.processing.ai.models import AIUsageStats
from feed_reconciler.processing.ai.prompts import build_categorization_prompt
from feed_reconciler.processing.policy import DispatchPolicy
from feed_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_AI_CONFIDENCE = 0.6


class AIClassifier:
    """Best-effort categorization through a language model.

    Every failure mode (no model configured, request error, unparsable or
    mis-shaped response) yields None so the transaction falls through to
    manual review. Nothing is raised to the caller.
    """

    def __init__(
        self,
        model: LanguageModel | None,
        policy: DispatchPolicy | None = None,
        default_confidence: float = DEFAULT_AI_CONFIDENCE,
        usage_stats: AIUsageStats | None = None,
    ):
        """Initialize the classifier.

        Args:
            model: Language model collaborator; None disables classification.
            policy: Thresholds used to infer an action from confidence.
            default_confidence: Confidence used when the model omits one.
            usage_stats: Shared stats object (the client's, when available).
        """
        self.model = model
        self.policy = policy or DispatchPolicy()
        self.default_confidence = default_confidence
        self.usage_stats = usage_stats if usage_stats is not None else AIUsageStats()

    @property
    def is_available(self) -> bool:
        if self.model is None:
            return False
        return bool(getattr(self.model, "is_available", True))

    async def classify(self, txn: BankTransaction) -> CategorizationDecision | None:
        """Ask the language model for a decision.

        Args:
            txn: Transaction no rule matched.

        Returns:
            Decision, or None when the model is unavailable or unusable.
        """
        if not self.is_available:
            logger.debug("AI classifier not configured, skipping")
            return None

        prompt = build_categorization_prompt(self.summarize(txn))
        try:
            response = await self.model.complete(prompt)  # type: ignore[union-attr]
        except Exception as e:
            logger.warning(f"AI classification failed for {txn.description[:40]!r}: {e}")
            return None

        decision = self.parse_decision(response, txn)
        if decision is None:
            self.usage_stats.parse_failures += 1
        else:
            self.usage_stats.classifications_performed += 1
            logger.debug(
                f"AI classified {txn.description[:40]!r}: {decision.category} "
                f"(confidence: {decision.confidence:.2f}, action: {decision.action.value})"
            )
        return decision

    def summarize(self, txn: BankTransaction) -> dict[str, object]:
        """Compact representation of a transaction for the prompt."""
        summary: dict[str, object] = {
            "date": txn.date,
            "description": txn.description,
            "payee": txn.payee,
            "memo": txn.memo or "",
            "currentCategory": txn.category or "",
            "amount": float(txn.absolute_amount),
            "side": txn.side.value,
            "isRevenue": txn.is_revenue,
        }
        if txn.suggested_category:
            summary["suggestedCategory"] = txn.suggested_category
        return summary

    def parse_decision(
        self, response: str, txn: BankTransaction
    ) -> CategorizationDecision | None:
        """Turn a raw model response into a decision.

        Args:
            response: Raw response text.
            txn: Transaction being classified (for side-dependent actions).

        Returns:
            Decision, or None if the response is not the expected shape.
        """
        try:
            data = parse_json_response(response)
        except ValueError as e:
            logger.warning(f"Failed to parse AI response: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning("Expected a JSON object from AI, got a list")
            return None

        category = data.get("category")
        if not isinstance(category, str) or not category.strip():
            logger.warning(f"AI response has no usable category: {data!r}")
            return None

        raw_confidence = data.get("confidence")
        if raw_confidence is None:
            confidence = self.default_confidence
        elif isinstance(raw_confidence, bool) or not isinstance(raw_confidence, (int, float, str)):
            logger.warning(f"AI response has invalid confidence: {raw_confidence!r}")
            return None
        else:
            try:
                confidence = clamp_confidence(float(raw_confidence))
            except ValueError:
                logger.warning(f"AI response has invalid confidence: {raw_confidence!r}")
                return None

        reason = data.get("reason")
        explicit = Action.parse(data.get("action"))
        if explicit is not None:
            action = explicit
        else:
            action = self._action_for_confidence(confidence, txn)

        return CategorizationDecision(
            category=category.strip(),
            confidence=confidence,
            action=action,
            reason=str(reason) if reason is not None else None,
            source=DecisionSource.AI,
            explicit_action=explicit is not None,
        )

    def _action_for_confidence(self, confidence: float, txn: BankTransaction) -> Action:
        """Provisional action before normalization."""
        if confidence < self.policy.fallback_threshold:
            return Action.MARK_FOR_REVIEW
        if txn.side is TransactionSide.DEBIT:
            return Action.ADD
        return Action.MATCH
