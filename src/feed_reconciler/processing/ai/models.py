"""AI-specific data models."""

from dataclasses import dataclass


@dataclass
class AIUsageStats:
    """Cumulative AI usage statistics for a run.

    Attributes:
        total_requests: Total API requests made.
        total_input_tokens: Total input tokens used.
        total_output_tokens: Total output tokens used.
        classifications_performed: Responses turned into decisions.
        parse_failures: Responses that could not be used.
        request_failures: Requests that failed after all retries.
    """

    total_requests: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    classifications_performed: int = 0
    parse_failures: int = 0
    request_failures: int = 0

    def add_request(self, input_tokens: int, output_tokens: int) -> None:
        """Record a completed request."""
        self.total_requests += 1
        self.total_input_tokens += input_tokens
        self.total_output_tokens += output_tokens
