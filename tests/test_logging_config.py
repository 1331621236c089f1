"""Tests for logging configuration."""

import logging
from pathlib import Path

import pytest

from feed_reconciler.utils.logging_config import (
    LogContext,
    SecretMaskingFilter,
    get_logger,
    mask_secrets,
    setup_logging,
)


class TestGetLogger:
    """Tests for get_logger."""

    def test_module_names_not_double_prefixed(self) -> None:
        """Test that package module names are used as-is."""
        assert get_logger("feed_reconciler.processing.engine").name == (
            "feed_reconciler.processing.engine"
        )

    def test_foreign_names_nested(self) -> None:
        """Test that other names are nested under the application logger."""
        assert get_logger("scripts").name == "feed_reconciler.scripts"


class TestSecretMasking:
    """Tests for credential masking."""

    def test_mask_webhook_and_key(self) -> None:
        """Test that webhook URLs and API keys are masked."""
        text = (
            "POST https://hooks.slack.com/services/T00/B00/abcDEF123 failed, "
            "key sk-ant-api03-xyz_123"
        )
        masked = mask_secrets(text)
        assert "hooks.slack.com" not in masked
        assert "sk-ant" not in masked
        assert masked.count("***") == 2

    def test_filter_rewrites_record(self) -> None:
        """Test that the filter masks secrets passed as format arguments."""
        record = logging.LogRecord(
            "feed_reconciler", logging.WARNING, __file__, 1,
            "Webhook %s rejected", ("https://hooks.slack.com/services/T/B/C",), None,
        )
        assert SecretMaskingFilter().filter(record) is True
        assert record.getMessage() == "Webhook *** rejected"

    def test_filter_leaves_plain_records(self) -> None:
        """Test that records without secrets keep their arguments."""
        record = logging.LogRecord(
            "feed_reconciler", logging.INFO, __file__, 1, "Loaded %d rows", (3,), None
        )
        SecretMaskingFilter().filter(record)
        assert record.args == (3,)


class TestSetupLogging:
    """Tests for setup_logging and LogContext."""

    def test_writes_masked_file(self, tmp_path: Path) -> None:
        """Test that secrets never reach the log file."""
        log_file = tmp_path / "run.log"
        logger = setup_logging(level="DEBUG", log_file=str(log_file), console_output=False)
        try:
            get_logger("tests").info("using sk-ant-secret-value")
            for handler in logger.handlers:
                handler.flush()
            content = log_file.read_text(encoding="utf-8")
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
        assert "sk-ant" not in content
        assert "using ***" in content

    def test_log_context_masks_sensitive_keys(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that sensitive context keys are masked in the start message."""
        logger = logging.getLogger("feed_reconciler.tests.context")
        with caplog.at_level(logging.INFO, logger="feed_reconciler.tests.context"):
            with LogContext(logger, "notify", webhook_url="https://example", lines=3) as ctx:
                pass
        assert "webhook_url=***" in caplog.text
        assert "lines=3" in caplog.text
        assert "Completed notify" in caplog.text
        assert ctx.elapsed >= 0.0

    def test_log_context_reraises(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that LogContext logs failures and re-raises them."""
        logger = logging.getLogger("feed_reconciler.tests.context")
        with caplog.at_level(logging.ERROR, logger="feed_reconciler.tests.context"):
            with pytest.raises(RuntimeError):
                with LogContext(logger, "run"):
                    raise RuntimeError("boom")
        assert "run failed after" in caplog.text
