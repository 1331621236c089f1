"""Confidence thresholds shared by the classifier and the dispatcher."""

from dataclasses import dataclass

from feed_reconciler.errors import ConfigError
from feed_reconciler.models.report import ConfidenceTier

DEFAULT_PRIMARY_THRESHOLD = 0.9
DEFAULT_FALLBACK_THRESHOLD = 0.7


@dataclass(frozen=True)
class DispatchPolicy:
    """Confidence tiers gating automatic execution.

    Attributes:
        primary_threshold: At or above this, actions execute on the primary tier.
        fallback_threshold: At or above this (and below primary), actions
            execute on the fallback tier. Below it, rows are left for review.
    """

    primary_threshold: float = DEFAULT_PRIMARY_THRESHOLD
    fallback_threshold: float = DEFAULT_FALLBACK_THRESHOLD

    def __post_init__(self) -> None:
        if not 0.0 <= self.fallback_threshold <= self.primary_threshold <= 1.0:
            raise ConfigError(
                "Thresholds must satisfy 0 <= fallback <= primary <= 1, got "
                f"fallback={self.fallback_threshold}, primary={self.primary_threshold}"
            )

    def tier_for(self, confidence: float) -> ConfidenceTier:
        """Classify a confidence score into an execution tier."""
        if confidence >= self.primary_threshold:
            return ConfidenceTier.PRIMARY
        if confidence >= self.fallback_threshold:
            return ConfidenceTier.FALLBACK
        return ConfidenceTier.BELOW_THRESHOLD

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "DispatchPolicy":
        """Create from a settings dictionary."""
        try:
            return cls(
                primary_threshold=float(data.get("primary_threshold", DEFAULT_PRIMARY_THRESHOLD)),  # type: ignore[arg-type]
                fallback_threshold=float(data.get("fallback_threshold", DEFAULT_FALLBACK_THRESHOLD)),  # type: ignore[arg-type]
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid dispatch thresholds: {e}") from e
