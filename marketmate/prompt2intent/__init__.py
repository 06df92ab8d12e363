"""
Prompt to intent: parse conversational marketing requests into campaign intents.
"""

from marketmate.prompt2intent.campaign_intent import (
    CampaignIntent,
    ContentSpec,
    AudienceCriteria,
    Schedule
)
from marketmate.prompt2intent.intent_validator import IntentValidator
from marketmate.prompt2intent.intent_parser import IntentParser
from marketmate.prompt2intent.llm_client import OpenRouterLLMClient
from marketmate.prompt2intent.input_sanitizer import sanitize_input, sanitize_conversation_history
