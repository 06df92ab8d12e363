"""
Constants for the marketmate package.

This module provides constants used throughout the marketmate package.
These constants can be easily changed in one place.
"""

# LLM Models
DEFAULT_LLM_MODEL = "openai/gpt-4o-mini"

# API Endpoints
OPENROUTER_API_ENDPOINT = "https://openrouter.ai/api/v1"

# Default Values
DEFAULT_MAX_TOKENS = 2000
DEFAULT_LLM_TIMEOUT = 30  # seconds, upper bound for a single LLM call

# Per-component temperatures
DEFAULT_PARSER_TEMPERATURE = 0.3
DEFAULT_GENERATOR_TEMPERATURE = 0.7
DEFAULT_ANALYTICS_TEMPERATURE = 0.5

# Channels
CHANNELS = ["email", "social", "ppc", "sms"]
SOCIAL_PLATFORMS = ["facebook", "instagram", "twitter", "linkedin"]
DEFAULT_SOCIAL_FANOUT = ["facebook", "instagram"]

# Character limits and style hints per social platform
SOCIAL_PLATFORM_SPECS = {
    "facebook": {"max_length": 500, "style": "conversational and engaging"},
    "instagram": {"max_length": 300, "style": "visual-focused with emojis"},
    "twitter": {"max_length": 280, "style": "concise and punchy"},
    "linkedin": {"max_length": 700, "style": "professional and insightful"},
}

# Input limits
DEFAULT_MAX_INPUT_LENGTH = 5000
DEFAULT_MAX_PROMPT_LENGTH = 2000

# Campaign lifecycle
CAMPAIGN_STATUSES = ["draft", "ready", "launched", "partially_launched", "completed", "paused"]

# Pagination
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

# Storage
DEFAULT_DATABASE_FILE = "~/.marketmate/marketmate.db"
