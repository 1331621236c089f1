"""Categorization decision model."""

import math
from dataclasses import dataclass
from enum import Enum


class Action(Enum):
    """Remediation action for a bank feed row."""

    ADD = "add"  # Expense: create and accept a categorized entry
    MATCH = "match"  # Revenue: reconcile against an existing record
    MARK_FOR_REVIEW = "mark_for_review"

    @property
    def is_executable(self) -> bool:
        """Whether the dispatcher may apply this action automatically."""
        return self in (Action.ADD, Action.MATCH)

    @classmethod
    def parse(cls, value: object) -> "Action | None":
        """Parse an action name, returning None for anything unknown."""
        if isinstance(value, Action):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class DecisionSource(Enum):
    """Component that produced a decision."""

    RULE = "rule"
    AI = "ai"


def clamp_confidence(value: float) -> float:
    """Clamp a confidence score into [0, 1]. NaN becomes 0."""
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class CategorizationDecision:
    """Category, confidence, and action chosen for one transaction.

    Attributes:
        category: Category name to assign (non-empty).
        confidence: Certainty in [0, 1]; clamped on construction.
        action: Remediation action to take.
        reason: Rule name or model rationale.
        source: Whether a rule or the AI produced the decision.
        explicit_action: True when the action was fixed by the rule or
            supplied by the model rather than inferred.
    """

    category: str
    confidence: float
    action: Action = Action.MARK_FOR_REVIEW
    reason: str | None = None
    source: DecisionSource = DecisionSource.RULE
    explicit_action: bool = False

    def __post_init__(self) -> None:
        if not self.category or not self.category.strip():
            raise ValueError("Decision category must be a non-empty string")
        # Frozen dataclass: bypass __setattr__ to store the clamped value
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
