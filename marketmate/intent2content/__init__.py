"""
Intent to content: generate per-channel campaign content from a campaign intent.
"""

from marketmate.intent2content.generated_content import (
    GeneratedContent,
    EmailContent,
    SocialContent,
    PPCContent,
    SMSContent,
    content_from_dict,
    content_map_to_dict,
    content_map_from_dict
)
from marketmate.intent2content.content_generator import ContentGenerator
