"""
Generated content types.

Each channel has its own content class. A campaign's content map is keyed by
channel name, except social content, which is keyed by platform
(e.g. "facebook", "instagram"). Plain dictionaries are only used at the
persistence boundary, through content_map_to_dict and content_map_from_dict.
"""

import jsonschema
from typing import Dict, Any, List, Optional

from marketmate.core.constants import SOCIAL_PLATFORMS
from marketmate.core.error_handler import ValidationError
from marketmate.schemas import load_schema

FIELDS = ["subject", "body", "preview", "headline", "description", "cta"]

_content_schema = None


def _get_content_schema() -> Dict[str, Any]:
    global _content_schema
    if _content_schema is None:
        _content_schema = load_schema("channel_content")
    return _content_schema


class GeneratedContent:
    """
    Base class for generated channel content.

    Attributes:
        channel: Channel this content belongs to.
        subject, body, preview, headline, description, cta: Content fields; unused ones are None.
    """

    channel = None
    REQUIRED_FIELDS: List[str] = []

    def __init__(
        self,
        subject: Optional[str] = None,
        body: Optional[str] = None,
        preview: Optional[str] = None,
        headline: Optional[str] = None,
        description: Optional[str] = None,
        cta: Optional[str] = None
    ):
        self.subject = subject
        self.body = body
        self.preview = preview
        self.headline = headline
        self.description = description
        self.cta = cta

    @property
    def key(self) -> str:
        """Key of this content in a campaign content map."""
        return self.channel

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratedContent":
        return cls(**{field: data.get(field) for field in FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        return {
            field: getattr(self, field)
            for field in FIELDS
            if getattr(self, field) is not None
        }

    def __eq__(self, other):
        return type(self) is type(other) and self.key == other.key and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{self.__class__.__name__}({self.to_dict()!r})"


class EmailContent(GeneratedContent):
    channel = "email"
    REQUIRED_FIELDS = ["subject", "body"]


class SocialContent(GeneratedContent):
    """Social post for one platform. Hashtags are folded into description."""

    channel = "social"
    REQUIRED_FIELDS = ["body"]

    def __init__(self, platform: str, **fields):
        super().__init__(**fields)
        self.platform = platform

    @property
    def key(self) -> str:
        return self.platform

    @classmethod
    def from_dict(cls, data: Dict[str, Any], platform: str = None) -> "SocialContent":
        return cls(platform, **{field: data.get(field) for field in FIELDS})


class PPCContent(GeneratedContent):
    channel = "ppc"
    REQUIRED_FIELDS = ["headline", "description"]


class SMSContent(GeneratedContent):
    channel = "sms"
    REQUIRED_FIELDS = ["body"]


CONTENT_TYPES = {
    "email": EmailContent,
    "ppc": PPCContent,
    "sms": SMSContent,
}


def content_from_dict(key: str, data: Dict[str, Any]) -> GeneratedContent:
    """
    Build typed content from its stored form.

    Args:
        key (str): Content map key: a channel name, or a social platform
        data (Dict[str, Any]): Stored content fields

    Returns:
        GeneratedContent: The typed content

    Raises:
        ValidationError: If the key is unknown or the fields have the wrong types
    """
    try:
        jsonschema.validate(instance=data, schema=_get_content_schema())
    except jsonschema.exceptions.ValidationError as e:
        raise ValidationError(f"Invalid content for {key}: {e.message}", field=key) from e

    if key in CONTENT_TYPES:
        return CONTENT_TYPES[key].from_dict(data)
    if key in SOCIAL_PLATFORMS:
        return SocialContent.from_dict(data, platform=key)
    raise ValidationError(f"Unknown content key: {key}", field=key, value=key)


def content_map_to_dict(content: Dict[str, GeneratedContent]) -> Dict[str, Dict[str, Any]]:
    """
    Serialize a content map for storage.

    Args:
        content (Dict[str, GeneratedContent]): Content keyed by channel or platform

    Returns:
        Dict[str, Dict[str, Any]]: Plain dictionaries keyed the same way
    """
    return {key: item.to_dict() for key, item in content.items()}


def content_map_from_dict(data: Optional[Dict[str, Dict[str, Any]]]) -> Dict[str, GeneratedContent]:
    """
    Rebuild a content map from storage.

    Args:
        data (Dict[str, Dict[str, Any]], optional): Stored content map

    Returns:
        Dict[str, GeneratedContent]: Typed content keyed by channel or platform
    """
    return {key: content_from_dict(key, item) for key, item in (data or {}).items()}
