"""AI-assisted transaction categorization.

The classifier is a fallback for transactions no rule matched. It talks to
any LanguageModel collaborator; AIClient is the Anthropic-backed one.

Example usage:
    from feed_reconciler.processing.ai import AIClassifier, AIClient

    client = AIClient()
    classifier = AIClassifier(client, usage_stats=client.usage_stats)
    decision = await classifier.classify(transaction)
"""

from feed_reconciler.processing.ai.classifier import DEFAULT_AI_CONFIDENCE, AIClassifier
from feed_reconciler.processing.ai.client import (
    AIClient,
    AIClientConfig,
    AIClientError,
    APIKeyNotFoundError,
    parse_json_response,
)
from feed_reconciler.processing.ai.models import AIUsageStats

__all__ = [
    "AIClassifier",
    "AIClient",
    "AIClientConfig",
    "AIClientError",
    "APIKeyNotFoundError",
    "AIUsageStats",
    "DEFAULT_AI_CONFIDENCE",
    "parse_json_response",
]
