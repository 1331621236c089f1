"""Configuration loading and validation for the feed reconciler."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from feed_reconciler.errors import ConfigError
from feed_reconciler.models.rule import Rule
from feed_reconciler.processing.ai.classifier import DEFAULT_AI_CONFIDENCE
from feed_reconciler.processing.ai.client import AIClientConfig
from feed_reconciler.processing.engine import DEFAULT_FEED_LIMIT
from feed_reconciler.processing.policy import DispatchPolicy
from feed_reconciler.processing.rule_matcher import default_rules
from feed_reconciler.utils.logging_config import DEFAULT_LOG_FILE, get_logger

logger = get_logger(__name__)


def _flag(data: dict[str, object], key: str, default: bool) -> bool:
    """Read a YAML boolean, rejecting strings like "false" or numbers."""
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


@dataclass
class FeedConfig:
    """Configuration for reading the bank feed.

    Attributes:
        limit: Maximum number of "for review" rows per run.
    """

    limit: int = DEFAULT_FEED_LIMIT

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "FeedConfig":
        """Create from dictionary."""
        try:
            limit = int(data.get("limit", DEFAULT_FEED_LIMIT))  # type: ignore[arg-type]
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid feed limit: {e}") from e
        if limit < 0:
            raise ConfigError(f"Feed limit must be >= 0, got {limit}")
        return cls(limit=limit)


@dataclass
class DispatchConfig:
    """Configuration for action dispatch.

    Attributes:
        policy: Confidence tiers gating execution.
        dry_run: Log actions instead of applying them.
    """

    policy: DispatchPolicy = field(default_factory=DispatchPolicy)
    dry_run: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "DispatchConfig":
        """Create from dictionary."""
        return cls(
            policy=DispatchPolicy.from_dict(data),
            dry_run=_flag(data, "dry_run", False),
        )


@dataclass
class AIConfig:
    """Configuration for the AI fallback classifier.

    Attributes:
        enabled: Whether the classifier is used at all.
        client: Anthropic client settings.
        default_confidence: Confidence assumed when the model omits one.
    """

    enabled: bool = True
    client: AIClientConfig = field(default_factory=AIClientConfig)
    default_confidence: float = DEFAULT_AI_CONFIDENCE

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "AIConfig":
        """Create from dictionary."""
        try:
            default_confidence = float(data.get("default_confidence", DEFAULT_AI_CONFIDENCE))  # type: ignore[arg-type]
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid AI default_confidence: {e}") from e
        if not 0.0 <= default_confidence <= 1.0:
            raise ConfigError(f"AI default_confidence must be in [0, 1], got {default_confidence}")
        return cls(
            enabled=_flag(data, "enabled", True),
            client=AIClientConfig.from_dict(data),
            default_confidence=default_confidence,
        )


@dataclass
class NotifierConfig:
    """Configuration for summary delivery.

    Attributes:
        slack_webhook_env: Environment variable holding the Slack webhook URL.
    """

    slack_webhook_env: str = "SLACK_WEBHOOK_URL"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "NotifierConfig":
        """Create from dictionary."""
        return cls(slack_webhook_env=str(data.get("slack_webhook_env", "SLACK_WEBHOOK_URL")))


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file.
    """

    level: str = "INFO"
    file: str = DEFAULT_LOG_FILE

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(data.get("file", DEFAULT_LOG_FILE)),
        )


@dataclass
class Config:
    """Main configuration container.

    Attributes:
        rules: Categorization rules in evaluation order.
        feed: Bank feed settings.
        dispatch: Dispatch settings.
        ai: AI classifier settings.
        notifier: Notification settings.
        logging: Logging settings.
    """

    rules: list[Rule] = field(default_factory=default_rules)
    feed: FeedConfig = field(default_factory=FeedConfig)
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    notifier: NotifierConfig = field(default_factory=NotifierConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def require_credentials(self) -> None:
        """Check that every enabled collaborator has its credentials.

        Raises:
            ConfigError: If the AI classifier is enabled without an API key.
        """
        if self.ai.enabled and not os.environ.get(self.ai.client.api_key_env):
            raise ConfigError(
                f"AI classification is enabled but {self.ai.client.api_key_env} is not set "
                "(set it, or disable AI with --no-ai / ai.enabled: false)"
            )


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML mapping from a file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content (empty dict for an empty file).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the file is invalid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> dict[str, object]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def load_settings(path: Path, config: Config) -> None:
    """Load settings.yaml into an existing Config.

    Args:
        path: Path to settings.yaml.
        config: Config to update in place.
    """
    data = load_yaml_file(path)
    config.feed = FeedConfig.from_dict(_section(data, "feed"))
    config.dispatch = DispatchConfig.from_dict(_section(data, "dispatch"))
    config.ai = AIConfig.from_dict(_section(data, "ai"))
    config.notifier = NotifierConfig.from_dict(_section(data, "notifier"))
    config.logging = LoggingConfig.from_dict(_section(data, "logging"))


def load_rules(path: Path) -> list[Rule]:
    """Load categorization rules from rules.yaml.

    Rules keep their file order; no sorting or deduplication is applied.

    Args:
        path: Path to rules.yaml.

    Returns:
        List of rules in evaluation order.
    """
    data = load_yaml_file(path)

    rule_list = data.get("rules")
    if rule_list is None:
        return []
    if not isinstance(rule_list, list):
        raise ConfigError(f"'rules' must be a list, got {type(rule_list).__name__}")

    return [Rule.from_dict(rule_data) for rule_data in rule_list]


def load_config(
    settings_path: Optional[Path] = None,
    rules_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
) -> Config:
    """Load complete configuration.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        rules_path: Path to rules.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object.

    Raises:
        ConfigError: If a config file is present but invalid.
    """
    if config_dir is None:
        config_dir = Path("config")
    if settings_path is None:
        settings_path = config_dir / "settings.yaml"
    if rules_path is None:
        rules_path = config_dir / "rules.yaml"

    config = Config()

    if settings_path.exists():
        load_settings(settings_path, config)
        logger.info(f"Loaded settings from {settings_path}")
    else:
        logger.warning(f"Settings file not found: {settings_path}, using defaults")

    if rules_path.exists():
        config.rules = load_rules(rules_path)
        logger.info(f"Loaded {len(config.rules)} rules from {rules_path}")
    else:
        logger.warning(f"Rules file not found: {rules_path}, using {len(config.rules)} default rules")

    return config
