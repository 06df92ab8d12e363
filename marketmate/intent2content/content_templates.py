"""
Prompt templates for per-channel content generation.

Every template asks for a JSON object with the exact field names the content
generator checks for. Length targets are requests to the model only.
"""
from typing import Dict

from marketmate.core.constants import SOCIAL_PLATFORM_SPECS
from marketmate.prompt2intent.campaign_intent import CampaignIntent

DEFAULT_BRAND_VOICES = {
    "email": "professional and friendly",
    "social": "engaging and authentic",
    "ppc": "persuasive and clear",
    "sms": "friendly and direct",
}

DEFAULT_CALLS_TO_ACTION = {
    "email": "Learn More",
    "ppc": "Get Started",
    "sms": "Reply YES",
}

DEFAULT_AUDIENCE = "general audience"

EMAIL_PROMPT_TEMPLATE = """You are an expert email marketing copywriter. Generate compelling email content.

Campaign Goal: {goal}
Key Message: {key_message}
Call to Action: {cta}
Target Audience: {audience}
Brand Voice: {brand_voice}

Generate:
1. Subject line (compelling, under 60 characters)
2. Preview text (under 100 characters)
3. Email body (HTML-friendly, 200-400 words, persuasive, with clear structure)

Format as JSON:
{{
  "subject": "...",
  "preview": "...",
  "body": "..."
}}

Output:"""

SOCIAL_PROMPT_TEMPLATE = """You are a social media content creator for {platform}. Generate engaging post content.

Campaign Goal: {goal}
Key Message: {key_message}
Platform: {platform}
Max Length: {max_length} characters
Style: {style}
Brand Voice: {brand_voice}

Generate a compelling social media post with:
1. Main copy (within character limit)
2. Relevant hashtags (3-5)
3. Call to action

Format as JSON:
{{
  "body": "...",
  "hashtags": ["...", "..."],
  "cta": "..."
}}

Output:"""

PPC_PROMPT_TEMPLATE = """You are a PPC advertising expert. Generate high-converting ad copy.

Campaign Goal: {goal}
Key Message: {key_message}
Call to Action: {cta}
Target Audience: {audience}
Brand Voice: {brand_voice}

Generate:
1. Headline (under 30 characters, attention-grabbing)
2. Description (under 90 characters, benefit-focused)
3. Call to action (2-3 words)

Format as JSON:
{{
  "headline": "...",
  "description": "...",
  "cta": "..."
}}

Output:"""

SMS_PROMPT_TEMPLATE = """You are an SMS marketing expert. Generate concise, effective SMS content.

Campaign Goal: {goal}
Key Message: {key_message}
Call to Action: {cta}
Brand Voice: {brand_voice}

Generate SMS message (under 160 characters, clear and actionable).

Format as JSON:
{{
  "body": "..."
}}

Output:"""


def _common_fields(intent: CampaignIntent, channel: str, brand_voice: str) -> Dict[str, str]:
    return {
        "goal": intent.goal,
        "key_message": intent.content_spec.key_message,
        "cta": intent.content_spec.call_to_action or DEFAULT_CALLS_TO_ACTION.get(channel, ""),
        "audience": intent.audience_criteria.demographics or DEFAULT_AUDIENCE,
        "brand_voice": brand_voice or DEFAULT_BRAND_VOICES[channel],
    }


def generate_email_prompt(intent: CampaignIntent, brand_voice: str = None) -> str:
    return EMAIL_PROMPT_TEMPLATE.format(**_common_fields(intent, "email", brand_voice))


def generate_social_prompt(intent: CampaignIntent, platform: str, brand_voice: str = None) -> str:
    """
    Render the social post prompt for one platform.

    Args:
        intent (CampaignIntent): A complete campaign intent
        platform (str): Platform key from SOCIAL_PLATFORM_SPECS
        brand_voice (str, optional): Brand voice to write in

    Returns:
        str: The rendered prompt
    """
    spec = SOCIAL_PLATFORM_SPECS[platform]
    fields = _common_fields(intent, "social", brand_voice)
    return SOCIAL_PROMPT_TEMPLATE.format(
        platform=platform,
        max_length=spec["max_length"],
        style=spec["style"],
        **fields
    )


def generate_ppc_prompt(intent: CampaignIntent, brand_voice: str = None) -> str:
    return PPC_PROMPT_TEMPLATE.format(**_common_fields(intent, "ppc", brand_voice))


def generate_sms_prompt(intent: CampaignIntent, brand_voice: str = None) -> str:
    return SMS_PROMPT_TEMPLATE.format(**_common_fields(intent, "sms", brand_voice))
