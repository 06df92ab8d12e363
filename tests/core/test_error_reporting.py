"""
Tests for the error reporting collaborators.
"""

import pytest
from unittest.mock import MagicMock

from marketmate.core.error_handler import LLMParsingError
from marketmate.core.error_reporting import ErrorReporter, LoggingErrorReporter

class TestLoggingErrorReporter:
    """
    Tests for LoggingErrorReporter.
    """

    @pytest.fixture
    def report_logger(self):
        return MagicMock()

    def test_error_reporter_is_abstract(self):
        """
        Test that the base interface cannot be instantiated.
        """
        with pytest.raises(TypeError):
            ErrorReporter()

    def test_logs_tags_and_error(self, report_logger):
        """
        Test that the error and its tags are logged at the requested level.
        """
        reporter = LoggingErrorReporter(report_logger)
        error = LLMParsingError("No JSON object found")

        reporter.capture_exception(
            error,
            tags={"component": "ContentGenerator", "method": "generate_email_content"},
            extra={"goal": "increase signups"}
        )

        message = report_logger.error.call_args[0][0]
        assert "component=ContentGenerator" in message
        assert "method=generate_email_content" in message
        assert "LLMParsingError" in message
        report_logger.debug.assert_any_call("  goal: increase signups")

    def test_redacts_sensitive_extras(self, report_logger):
        """
        Test that sensitive values in extras never reach the log.
        """
        reporter = LoggingErrorReporter(report_logger)

        reporter.capture_exception(
            ValueError("boom"),
            extra={"api_key": "sk-secret", "channel": "email"}
        )

        logged = " ".join(call[0][0] for call in report_logger.debug.call_args_list)
        assert "sk-secret" not in logged
        assert "channel: email" in logged

    def test_warning_level(self, report_logger):
        """
        Test that the level selects the logger method.
        """
        reporter = LoggingErrorReporter(report_logger)

        reporter.capture_exception(ValueError("minor"), level="warning")

        assert report_logger.warning.called
        assert not report_logger.error.called
