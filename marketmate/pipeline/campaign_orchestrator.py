"""
Campaign orchestrator.

This module runs one chat turn: parse the user's request into an intent, ask
for clarification or generate content for every requested channel, and store
the resulting campaign and conversation messages.
"""

from typing import Dict, Any, List, Optional, Tuple

from marketmate.core.logging_config import get_logger
from marketmate.core.config import get_config_value
from marketmate.core.constants import DEFAULT_SOCIAL_FANOUT, DEFAULT_MAX_PROMPT_LENGTH
from marketmate.core.error_handler import CampaignGenerationError
from marketmate.prompt2intent.campaign_intent import CampaignIntent
from marketmate.prompt2intent.input_sanitizer import sanitize_input, sanitize_conversation_history
from marketmate.intent2content.generated_content import GeneratedContent

logger = get_logger(__name__)

CAMPAIGN_READY_MESSAGE = (
    "Your campaign is ready! I've generated content for {channels}. "
    "Review the preview and let me know if you'd like any changes."
)


class CampaignOrchestrator:
    """
    Sequences intent parsing, content generation and persistence for a chat turn.

    Content generation failures are isolated per channel: a failed channel
    becomes a warning as long as at least one other channel succeeds.
    """

    def __init__(
        self,
        intent_parser,
        content_generator,
        store,
        social_platforms: Optional[List[str]] = None,
        max_prompt_length: Optional[int] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            intent_parser: IntentParser instance.
            content_generator: ContentGenerator instance.
            store: CampaignStore instance.
            social_platforms: Platforms generated for the social channel.
            max_prompt_length: Maximum length of a user prompt.
        """
        self.intent_parser = intent_parser
        self.content_generator = content_generator
        self.store = store
        self.social_platforms = list(
            social_platforms or get_config_value("orchestrator.social_platforms", DEFAULT_SOCIAL_FANOUT)
        )
        self.max_prompt_length = max_prompt_length or get_config_value(
            "input.max_prompt_length", DEFAULT_MAX_PROMPT_LENGTH
        )

    def handle_turn(
        self,
        user_id: str,
        prompt: str,
        conversation_history: Optional[List[Dict[str, str]]] = None,
        conversation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Handle one user message.

        Args:
            user_id: Owner of the conversation and campaign.
            prompt: Raw user message.
            conversation_history: Prior turns with "role" and "content".
            conversation_id: Existing conversation to continue; a new one is created if omitted.

        Returns:
            For a clarification: {"type": "clarification", "message", "intent", "conversation_id"}.
            For a campaign: {"type": "campaign", "intent", "content", "campaign_id",
            "conversation_id", "message"}, plus "warnings" when some channels failed.

        Raises:
            ValidationError: If the prompt or history is rejected.
            NotFoundError: If conversation_id does not belong to the user.
            GenerationUnavailableError: If the LLM could not be reached while parsing.
            LLMParsingError: If the parsed intent is invalid.
            CampaignGenerationError: If no channel produced content.
        """
        sanitized_prompt = sanitize_input(prompt, max_length=self.max_prompt_length)
        sanitized_history = sanitize_conversation_history(conversation_history or [])

        # The raw user message is recorded before parsing
        if conversation_id:
            self.store.append_message(user_id, conversation_id, "user", prompt)
        else:
            conversation = self.store.create_conversation(
                user_id, [{"role": "user", "content": prompt}]
            )
            conversation_id = conversation["id"]

        intent = self.intent_parser.parse_campaign_intent(sanitized_prompt, sanitized_history)

        if intent.needs_clarification:
            message = self.intent_parser.generate_response(intent)
            self.store.append_message(user_id, conversation_id, "assistant", message)
            logger.info(f"Asked {len(intent.clarification_questions)} clarification question(s)")
            return {
                "type": "clarification",
                "message": message,
                "intent": intent,
                "conversation_id": conversation_id
            }

        brand_voice = self.store.get_active_brand_voice(user_id)
        content, warnings = self.generate_channel_content(intent, brand_voice)

        if not content:
            logger.error(f"Content generation failed for every channel: {warnings}")
            raise CampaignGenerationError("Failed to generate content for any channel", errors=warnings)

        campaign = self.store.create_campaign(user_id, intent, content, status="ready")
        message = CAMPAIGN_READY_MESSAGE.format(channels=", ".join(intent.channels))
        self.store.append_message(user_id, conversation_id, "assistant", message, campaign_id=campaign["id"])
        self.store.set_current_campaign(user_id, conversation_id, campaign["id"])

        result = {
            "type": "campaign",
            "intent": intent,
            "content": content,
            "campaign_id": campaign["id"],
            "conversation_id": conversation_id,
            "message": message
        }
        if warnings:
            result["warnings"] = warnings
        return result

    def generate_channel_content(
        self,
        intent: CampaignIntent,
        brand_voice: Optional[str] = None
    ) -> Tuple[Dict[str, GeneratedContent], List[str]]:
        """
        Generate content for every channel in the intent.

        Each channel, and each social platform, is generated independently.

        Args:
            intent: A complete campaign intent.
            brand_voice: Brand voice passed to every generation call.

        Returns:
            Content keyed by channel or social platform, and one warning per failed generation.
        """
        content = {}
        warnings = []

        for channel in intent.channels:
            if channel == "social":
                for platform in self.social_platforms:
                    try:
                        content[platform] = self.content_generator.generate_social_content(
                            intent, platform, brand_voice
                        )
                    except Exception as e:
                        warning = f"Failed to generate social content for {platform}"
                        logger.warning(f"{warning}: {e}")
                        warnings.append(warning)
                continue

            try:
                content[channel] = self.content_generator.generate_content(
                    intent, channel, brand_voice=brand_voice
                )
            except Exception as e:
                warning = f"Failed to generate {channel} content"
                logger.warning(f"{warning}: {e}")
                warnings.append(warning)

        logger.info(f"Generated content for {len(content)} channel(s) with {len(warnings)} failure(s)")
        return content, warnings
