"""Anthropic API client wrapper with retries."""

import asyncio
import json
import os
from dataclasses import dataclass, field
from typing import Any

from feed_reconciler.errors import ClassificationError, ConfigError
from feed_reconciler.processing.ai.models import AIUsageStats
from feed_reconciler.processing.ai.prompts import CATEGORIZATION_SYSTEM_PROMPT
from feed_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)


class AIClientError(ClassificationError):
    """Base exception for AI client errors."""

    pass


class APIKeyNotFoundError(AIClientError):
    """Raised when API key is not found."""

    pass


@dataclass
class AIClientConfig:
    """Configuration for the AI client.

    Attributes:
        api_key_env: Environment variable name for API key.
        model: Model to use for requests.
        max_tokens: Maximum tokens for response.
        temperature: Sampling temperature.
        retry_attempts: Number of attempts per request.
        retry_delay: Initial delay between retries (exponential backoff).
        timeout: Per-request timeout in seconds.
    """

    api_key_env: str = "ANTHROPIC_API_KEY"
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 200
    temperature: float = 0.1
    retry_attempts: int = 3
    retry_delay: float = 1.0
    timeout: float = 60.0

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "AIClientConfig":
        """Create from dictionary."""
        defaults = cls()
        try:
            return cls(
                api_key_env=str(data.get("api_key_env", defaults.api_key_env)),
                model=str(data.get("model", defaults.model)),
                max_tokens=int(data.get("max_tokens", defaults.max_tokens)),  # type: ignore[arg-type]
                temperature=float(data.get("temperature", defaults.temperature)),  # type: ignore[arg-type]
                retry_attempts=int(data.get("retry_attempts", defaults.retry_attempts)),  # type: ignore[arg-type]
                retry_delay=float(data.get("retry_delay", defaults.retry_delay)),  # type: ignore[arg-type]
                timeout=float(data.get("timeout", defaults.timeout)),  # type: ignore[arg-type]
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid AI settings: {e}") from e


@dataclass
class AIClient:
    """Async wrapper around the Anthropic Messages API.

    Implements the LanguageModel collaborator interface:
    - Lazy initialization (only connects when first used)
    - Automatic retry with exponential backoff
    - Token usage tracking
    """

    config: AIClientConfig = field(default_factory=AIClientConfig)
    usage_stats: AIUsageStats = field(default_factory=AIUsageStats)
    _client: Any = field(default=None, init=False, repr=False)
    _initialized: bool = field(default=False, init=False)

    @property
    def is_available(self) -> bool:
        """Check if AI client can be initialized (API key exists)."""
        return bool(os.environ.get(self.config.api_key_env))

    def _ensure_initialized(self) -> None:
        """Lazily initialize the Anthropic client."""
        if self._initialized:
            return

        api_key = os.environ.get(self.config.api_key_env)
        if not api_key:
            raise APIKeyNotFoundError(
                f"API key not found in environment variable: {self.config.api_key_env}"
            )

        try:
            import anthropic

            self._client = anthropic.AsyncAnthropic(api_key=api_key)
            self._initialized = True
            logger.info(f"AI client initialized with model: {self.config.model}")
        except ImportError as err:
            raise AIClientError(
                "anthropic package not installed. Run: pip install anthropic"
            ) from err

    async def _make_request(self, system_prompt: str, user_prompt: str) -> str:
        """Make a single API request with retry logic.

        Args:
            system_prompt: The system prompt.
            user_prompt: The user prompt.

        Returns:
            Response text.

        Raises:
            AIClientError: If request fails after all retries.
        """
        self._ensure_initialized()

        last_error: Exception | None = None
        delay = self.config.retry_delay

        for attempt in range(self.config.retry_attempts):
            try:
                response = await self._client.messages.create(
                    model=self.config.model,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                    system=system_prompt,
                    messages=[{"role": "user", "content": user_prompt}],
                    timeout=self.config.timeout,
                )
            except Exception as e:
                last_error = e
                error_msg = str(e).lower()
                if "rate" in error_msg or "429" in error_msg:
                    logger.warning(f"Rate limited, waiting {delay}s before retry")
                elif "overloaded" in error_msg or "529" in error_msg:
                    logger.warning(f"API overloaded, waiting {delay}s before retry")
                else:
                    logger.warning(f"Request failed: {e}, retrying in {delay}s")
                if attempt < self.config.retry_attempts - 1:
                    await asyncio.sleep(delay)
                    delay *= 2
                continue

            if response.content and len(response.content) > 0:
                content = response.content[0].text
            else:
                content = ""
            input_tokens = response.usage.input_tokens
            output_tokens = response.usage.output_tokens
            self.usage_stats.add_request(input_tokens, output_tokens)

            logger.debug(f"Request completed: {input_tokens} in, {output_tokens} out")
            return content

        self.usage_stats.request_failures += 1
        raise AIClientError(
            f"Request failed after {self.config.retry_attempts} attempts: {last_error}"
        )

    async def complete(self, prompt: str) -> str:
        """Send a categorization prompt and return the raw response text.

        Raises:
            APIKeyNotFoundError: If the API key is not configured.
            AIClientError: If the request fails.
        """
        return await self._make_request(CATEGORIZATION_SYSTEM_PROMPT, prompt)

    def get_usage_summary(self) -> str:
        """Get a summary of API usage."""
        stats = self.usage_stats
        return (
            f"AI Usage Summary:\n"
            f"  Total requests: {stats.total_requests}\n"
            f"  Input tokens: {stats.total_input_tokens:,}\n"
            f"  Output tokens: {stats.total_output_tokens:,}\n"
            f"  Classifications: {stats.classifications_performed}\n"
            f"  Parse failures: {stats.parse_failures}\n"
            f"  Failed requests: {stats.request_failures}"
        )


def parse_json_response(response: str) -> dict[str, Any] | list[Any]:
    """Parse a JSON response from the model.

    Handles cases where the response contains extra text or code fences
    around the JSON.

    Args:
        response: The response string.

    Returns:
        Parsed JSON as a dictionary or list.

    Raises:
        ValueError: If JSON cannot be parsed.
    """
    response = response.strip()

    # Try direct parse first
    try:
        result = json.loads(response)
        if isinstance(result, (dict, list)):
            return result
        raise ValueError(f"JSON parsed to unexpected type: {type(result)}")
    except json.JSONDecodeError:
        pass

    start_brace = response.find("{")
    start_bracket = response.find("[")

    if start_brace == -1 and start_bracket == -1:
        raise ValueError(f"No JSON found in response: {response[:100]}")

    if start_brace == -1:
        start = start_bracket
    elif start_bracket == -1:
        start = start_brace
    else:
        start = min(start_brace, start_bracket)

    # Find matching end
    depth = 0
    for i, char in enumerate(response[start:], start):
        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                try:
                    result = json.loads(response[start : i + 1])
                    if isinstance(result, (dict, list)):
                        return result
                    raise ValueError(f"JSON parsed to unexpected type: {type(result)}")
                except json.JSONDecodeError:
                    break

    raise ValueError(f"Could not parse JSON from response: {response[:200]}")
