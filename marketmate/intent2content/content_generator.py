"""
Content generator.

This module generates campaign content for one channel at a time from a
complete CampaignIntent. Each call makes exactly one LLM request; a failure is
reported and raised as ContentGenerationError. No placeholder content is ever
returned.
"""

from typing import Dict, Any, Optional, Callable

from marketmate.core.logging_config import get_logger
from marketmate.core.config import get_config_value
from marketmate.core.constants import (
    CHANNELS,
    SOCIAL_PLATFORM_SPECS,
    DEFAULT_GENERATOR_TEMPERATURE
)
from marketmate.core.error_handler import (
    APIError,
    LLMParsingError,
    ValidationError,
    ContentGenerationError,
    validate_required_fields
)
from marketmate.core.error_reporting import ErrorReporter, LoggingErrorReporter
from marketmate.prompt2intent.campaign_intent import CampaignIntent
from marketmate.prompt2intent.llm_templates import extract_json_object
from marketmate.intent2content.generated_content import (
    FIELDS,
    GeneratedContent,
    EmailContent,
    SocialContent,
    PPCContent,
    SMSContent,
    content_from_dict
)
from marketmate.intent2content.content_templates import (
    DEFAULT_BRAND_VOICES,
    generate_email_prompt,
    generate_social_prompt,
    generate_ppc_prompt,
    generate_sms_prompt
)

# Initialize logger
logger = get_logger(__name__)


class ContentGenerator:
    """
    Generates per-channel campaign content with an LLM.
    """

    def __init__(
        self,
        llm_client,
        error_reporter: Optional[ErrorReporter] = None,
        temperature: Optional[float] = None
    ):
        """
        Initialize the content generator.

        Args:
            llm_client: Client with a complete(prompt, temperature) method
            error_reporter (ErrorReporter, optional): Where failures are reported
            temperature (float, optional): Sampling temperature for generation calls
        """
        self.llm_client = llm_client
        self.error_reporter = error_reporter or LoggingErrorReporter()
        self.temperature = temperature if temperature is not None else get_config_value(
            "content_generator.temperature", DEFAULT_GENERATOR_TEMPERATURE
        )

    def resolve_brand_voice(self, intent: CampaignIntent, channel: str, brand_voice: Optional[str] = None) -> str:
        """
        Pick the brand voice for a generation call.

        An explicit brand voice wins, then the tone requested in the intent,
        then the channel's default voice.

        Args:
            intent (CampaignIntent): The campaign intent
            channel (str): Channel name
            brand_voice (str, optional): Explicit brand voice

        Returns:
            str: The brand voice to use
        """
        return brand_voice or intent.content_spec.tone or DEFAULT_BRAND_VOICES[channel]

    def generate_email_content(self, intent: CampaignIntent, brand_voice: Optional[str] = None) -> EmailContent:
        """
        Generate email content: subject, preview and body.

        Args:
            intent (CampaignIntent): A complete campaign intent
            brand_voice (str, optional): Brand voice override

        Returns:
            EmailContent: The generated email

        Raises:
            ContentGenerationError: If generation fails for any reason
        """
        voice = self.resolve_brand_voice(intent, "email", brand_voice)
        return self._generate(
            method="generate_email_content",
            label="email",
            key="email",
            intent=intent,
            brand_voice=voice,
            prompt=generate_email_prompt(intent, voice),
            required_fields=EmailContent.REQUIRED_FIELDS
        )

    def generate_social_content(
        self,
        intent: CampaignIntent,
        platform: str,
        brand_voice: Optional[str] = None
    ) -> SocialContent:
        """
        Generate a social post for one platform.

        Hashtags returned by the model are joined with spaces into the
        description field.

        Args:
            intent (CampaignIntent): A complete campaign intent
            platform (str): facebook, instagram, twitter or linkedin
            brand_voice (str, optional): Brand voice override

        Returns:
            SocialContent: The generated post

        Raises:
            ValidationError: If the platform is not supported
            ContentGenerationError: If generation fails for any reason
        """
        if platform not in SOCIAL_PLATFORM_SPECS:
            raise ValidationError(f"Unsupported social platform: {platform}", field="platform", value=platform)

        voice = self.resolve_brand_voice(intent, "social", brand_voice)
        return self._generate(
            method="generate_social_content",
            label="social",
            key=platform,
            intent=intent,
            brand_voice=voice,
            prompt=generate_social_prompt(intent, platform, voice),
            required_fields=SocialContent.REQUIRED_FIELDS,
            transform=_fold_hashtags,
            extra={"platform": platform}
        )

    def generate_ppc_content(self, intent: CampaignIntent, brand_voice: Optional[str] = None) -> PPCContent:
        """
        Generate PPC ad copy: headline, description and call to action.

        Raises:
            ContentGenerationError: If generation fails for any reason
        """
        voice = self.resolve_brand_voice(intent, "ppc", brand_voice)
        return self._generate(
            method="generate_ppc_content",
            label="PPC",
            key="ppc",
            intent=intent,
            brand_voice=voice,
            prompt=generate_ppc_prompt(intent, voice),
            required_fields=PPCContent.REQUIRED_FIELDS
        )

    def generate_sms_content(self, intent: CampaignIntent, brand_voice: Optional[str] = None) -> SMSContent:
        """
        Generate an SMS message body.

        Raises:
            ContentGenerationError: If generation fails for any reason
        """
        voice = self.resolve_brand_voice(intent, "sms", brand_voice)
        return self._generate(
            method="generate_sms_content",
            label="SMS",
            key="sms",
            intent=intent,
            brand_voice=voice,
            prompt=generate_sms_prompt(intent, voice),
            required_fields=SMSContent.REQUIRED_FIELDS
        )

    def generate_content(
        self,
        intent: CampaignIntent,
        channel: str,
        platform: Optional[str] = None,
        brand_voice: Optional[str] = None
    ) -> GeneratedContent:
        """
        Generate content for a single channel.

        Args:
            intent (CampaignIntent): A complete campaign intent
            channel (str): email, social, ppc or sms
            platform (str, optional): Required when channel is social
            brand_voice (str, optional): Brand voice override

        Returns:
            GeneratedContent: The generated content

        Raises:
            ValidationError: If the channel is unknown, or social is requested without a platform
            ContentGenerationError: If generation fails
        """
        if channel not in CHANNELS:
            raise ValidationError(f"Unsupported channel: {channel}", field="channel", value=channel)

        if channel == "social":
            if not platform:
                raise ValidationError("Platform is required for social content", field="platform")
            return self.generate_social_content(intent, platform, brand_voice)

        handlers = {
            "email": self.generate_email_content,
            "ppc": self.generate_ppc_content,
            "sms": self.generate_sms_content,
        }
        return handlers[channel](intent, brand_voice)

    def _generate(
        self,
        method: str,
        label: str,
        key: str,
        intent: CampaignIntent,
        brand_voice: str,
        prompt: str,
        required_fields: list,
        transform: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None,
        extra: Optional[Dict[str, Any]] = None
    ) -> GeneratedContent:
        logger.info(f"Generating {label} content for goal: {intent.goal}")

        raw_output = None
        try:
            raw_output = self.llm_client.complete(prompt, temperature=self.temperature)
            parsed = extract_json_object(raw_output)
            if transform:
                parsed = transform(parsed)

            try:
                validate_required_fields(parsed, required_fields, component="ContentGenerator")
                content = content_from_dict(key, {field: parsed[field] for field in FIELDS if parsed.get(field) is not None})
            except ValidationError as e:
                raise LLMParsingError(f"Invalid fields in AI response: {e.message}", raw_output=raw_output) from e

        except (APIError, LLMParsingError) as e:
            report_extra = {"goal": intent.goal, "channel": key if key in CHANNELS else "social", "brandVoice": brand_voice}
            report_extra.update(extra or {})
            if raw_output is not None:
                report_extra["rawOutput"] = raw_output

            self.error_reporter.capture_exception(
                e,
                tags={"component": "ContentGenerator", "method": method},
                extra=report_extra
            )
            raise ContentGenerationError(label, cause=e) from e

        logger.info(f"Generated {label} content")
        return content


def _fold_hashtags(parsed: Dict[str, Any]) -> Dict[str, Any]:
    """Join the model's hashtag list into the description field."""
    folded = dict(parsed)
    hashtags = folded.pop("hashtags", None)
    if isinstance(hashtags, list):
        folded["description"] = " ".join(str(tag) for tag in hashtags)
    elif isinstance(hashtags, str):
        folded["description"] = hashtags
    else:
        folded["description"] = ""
    return folded
