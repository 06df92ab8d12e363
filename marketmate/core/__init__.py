"""
Core utilities and configuration for the marketmate package.
"""

from marketmate.core.config import get_config, get_config_value
from marketmate.core.credentials import get_api_key
from marketmate.core.logging_config import get_logger, configure_logging
from marketmate.core.error_handler import (
    APIError,
    GenerationUnavailableError,
    LLMParsingError,
    ValidationError,
    ConfigurationError,
    ContentGenerationError,
    CampaignGenerationError,
    CampaignLaunchError,
    AnalyticsError,
    NotFoundError
)
from marketmate.core.error_reporting import ErrorReporter, LoggingErrorReporter
