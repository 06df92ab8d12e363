"""
Error reporting interface.

Components that call the LLM report every failure here before re-raising a
user-facing error. Reports carry two dictionaries:

- tags: low-cardinality identifiers, always {"component": ..., "method": ...}
- extra: request context such as the campaign goal, channel or platform,
  brand voice and, when the model did answer, its raw output

The reporter is passed into each component's constructor. LoggingErrorReporter
is the default and writes reports through the standard logging setup; an
external monitoring service can be plugged in by subclassing ErrorReporter.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from marketmate.core.logging_config import get_logger, redact_sensitive_data

logger = get_logger(__name__)

class ErrorReporter(ABC):
    """
    Base interface for error reporting collaborators.
    """

    @abstractmethod
    def capture_exception(
        self,
        error: BaseException,
        tags: Optional[Dict[str, str]] = None,
        extra: Optional[Dict[str, Any]] = None,
        level: str = "error"
    ) -> None:
        """
        Report an exception.

        Args:
            error: The exception to report
            tags: Identifying tags, e.g. {"component": "ContentGenerator", "method": "generate_email_content"}
            extra: Additional context for debugging
            level: Severity level
        """
        pass


class LoggingErrorReporter(ErrorReporter):
    """
    Error reporter that writes reports to the application log.
    """

    def __init__(self, report_logger=None):
        self.logger = report_logger or logger

    def capture_exception(
        self,
        error: BaseException,
        tags: Optional[Dict[str, str]] = None,
        extra: Optional[Dict[str, Any]] = None,
        level: str = "error"
    ) -> None:
        tags = tags or {}
        extra = redact_sensitive_data(extra or {})

        tag_str = " ".join(f"{key}={value}" for key, value in sorted(tags.items()))
        log_method = getattr(self.logger, level, self.logger.error)
        log_method(f"[{tag_str}] {type(error).__name__}: {error}")
        for key, value in extra.items():
            self.logger.debug(f"  {key}: {value}")
