"""
Intent parser.

This module turns a user's marketing request, plus the conversation so far,
into a validated CampaignIntent with a single LLM call. It also renders the
assistant reply for an intent: clarification questions or a confirmation.
"""

from typing import Dict, Any, List, Optional

from marketmate.core.logging_config import get_logger
from marketmate.core.config import get_config_value
from marketmate.core.constants import DEFAULT_PARSER_TEMPERATURE
from marketmate.core.error_handler import (
    ValidationError,
    GenerationUnavailableError,
    LLMParsingError
)
from marketmate.core.error_reporting import ErrorReporter, LoggingErrorReporter
from marketmate.prompt2intent.campaign_intent import CampaignIntent
from marketmate.prompt2intent.intent_validator import IntentValidator
from marketmate.prompt2intent.llm_templates import generate_intent_prompt

# Initialize logger
logger = get_logger(__name__)

CLARIFICATION_INTRO = "I'd love to help you create this campaign! To get started, I need a bit more information:"
CLARIFICATION_OUTRO = "Please provide these details so I can create the perfect campaign for you."
CLARIFICATION_FALLBACK_QUESTION = "What is the goal of your campaign, which channels should it use, and what is the key message?"


class IntentParser:
    """
    Parses user prompts into campaign intents.
    """

    def __init__(
        self,
        llm_client,
        validator: Optional[IntentValidator] = None,
        error_reporter: Optional[ErrorReporter] = None,
        temperature: Optional[float] = None
    ):
        """
        Initialize the intent parser.

        Args:
            llm_client: Client with a complete(prompt, temperature) method
            validator (IntentValidator, optional): Validator for LLM output
            error_reporter (ErrorReporter, optional): Where failures are reported
            temperature (float, optional): Sampling temperature for parsing calls
        """
        self.llm_client = llm_client
        self.validator = validator or IntentValidator()
        self.error_reporter = error_reporter or LoggingErrorReporter()
        self.temperature = temperature if temperature is not None else get_config_value(
            "intent_parser.temperature", DEFAULT_PARSER_TEMPERATURE
        )

    def parse_campaign_intent(
        self,
        user_prompt: str,
        conversation_history: Optional[List[Dict[str, str]]] = None
    ) -> CampaignIntent:
        """
        Parse a user prompt into a campaign intent.

        Args:
            user_prompt (str): The sanitized user message
            conversation_history (List[Dict[str, str]], optional): Prior turns with "role" and "content"

        Returns:
            CampaignIntent: The validated intent

        Raises:
            ValidationError: If the prompt is empty
            GenerationUnavailableError: If the LLM could not be reached
            LLMParsingError: If the LLM output is not a valid campaign intent
        """
        if not user_prompt or not user_prompt.strip():
            raise ValidationError("Input cannot be empty", field="prompt")

        history = conversation_history or []
        prompt = generate_intent_prompt(
            user_prompt,
            history,
            self.validator.get_format_instructions()
        )
        logger.info(f"Parsing campaign intent ({len(history)} prior message(s))")

        raw_output = None
        try:
            raw_output = self.llm_client.complete(prompt, temperature=self.temperature)
            intent = self.validator.parse(raw_output)
        except (GenerationUnavailableError, LLMParsingError) as e:
            extra = {"prompt": user_prompt[:200], "historyLength": len(history)}
            if raw_output is not None:
                extra["rawOutput"] = raw_output
            self.error_reporter.capture_exception(
                e,
                tags={"component": "IntentParser", "method": "parse_campaign_intent"},
                extra=extra
            )
            raise

        return intent

    def generate_response(self, intent: CampaignIntent) -> str:
        """
        Render the assistant reply for an intent.

        Args:
            intent (CampaignIntent): A validated intent

        Returns:
            str: Numbered clarification questions, or a confirmation of the campaign to be created
        """
        if intent.needs_clarification:
            questions = intent.clarification_questions or [CLARIFICATION_FALLBACK_QUESTION]
            numbered = "\n".join(f"{i}. {question}" for i, question in enumerate(questions, 1))
            return f"{CLARIFICATION_INTRO}\n\n{numbered}\n\n{CLARIFICATION_OUTRO}"

        channel_list = ", ".join(intent.channels)
        budget_text = f" with a budget of ${_format_budget(intent.budget)}" if intent.budget else ""
        audience = intent.audience_criteria.demographics or "General audience"

        return (
            f"Perfect! I'm creating a {channel_list} campaign{budget_text} to {intent.goal}.\n\n"
            f"Key Message: {intent.content_spec.key_message}\n\n"
            f"Target Audience: {audience}\n\n"
            "I'll now generate the campaign content and set everything up. "
            "Would you like to review the content before we launch?"
        )


def _format_budget(budget: float) -> str:
    # 500.0 reads as "500"
    if float(budget).is_integer():
        return str(int(budget))
    return str(budget)
