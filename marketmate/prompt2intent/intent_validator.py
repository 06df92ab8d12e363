"""
Campaign intent validation.

This module validates LLM output against the campaign intent schema and turns
it into a CampaignIntent. Any problem with the output surfaces as an
LLMParsingError, so callers can tell a bad answer apart from an unreachable
model.
"""

import json
import jsonschema
from typing import Dict, Any

from marketmate.core.logging_config import get_logger
from marketmate.core.error_handler import LLMParsingError
from marketmate.schemas import load_schema
from marketmate.prompt2intent.campaign_intent import CampaignIntent
from marketmate.prompt2intent.llm_templates import extract_json_object

# Initialize logger
logger = get_logger(__name__)

FORMAT_INSTRUCTIONS_TEMPLATE = """The output should be formatted as a JSON instance that conforms to the JSON schema below.

As an example, for the schema {{"properties": {{"foo": {{"title": "Foo", "description": "a list of strings", "type": "array", "items": {{"type": "string"}}}}}}, "required": ["foo"]}}
the object {{"foo": ["bar", "baz"]}} is a well-formatted instance of the schema. The object {{"properties": {{"foo": ["bar", "baz"]}}}} is not well-formatted.

Here is the output schema:
```
{schema}
```"""


def _strip_nulls(value: Any) -> Any:
    """Drop keys whose value is null, recursively. Null optional fields count as absent."""
    if isinstance(value, dict):
        return {key: _strip_nulls(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_strip_nulls(item) for item in value]
    return value


class IntentValidator:
    """
    Validates raw LLM output and produces CampaignIntent values.
    """

    def __init__(self):
        """
        Initialize the validator with the campaign intent schema.
        """
        self.campaign_intent_schema = load_schema("campaign_intent")
        logger.debug("Loaded campaign intent schema")

    def get_format_instructions(self) -> str:
        """
        Get the output format instructions embedded in the intent prompt.

        Returns:
            str: Instructions describing the expected JSON shape
        """
        schema = {
            key: value
            for key, value in self.campaign_intent_schema.items()
            if key not in ("$schema", "title", "description")
        }
        return FORMAT_INSTRUCTIONS_TEMPLATE.format(schema=json.dumps(schema))

    def validate(self, data: Dict[str, Any]) -> CampaignIntent:
        """
        Validate a decoded intent object.

        Args:
            data (Dict[str, Any]): Intent object with camelCase keys

        Returns:
            CampaignIntent: The validated intent

        Raises:
            LLMParsingError: If the object does not conform to the schema, or
                claims to be complete while goal, channels or key message is missing
        """
        if not isinstance(data, dict):
            raise LLMParsingError("Campaign intent must be a JSON object")

        data = _strip_nulls(data)

        try:
            jsonschema.validate(instance=data, schema=self.campaign_intent_schema)
        except jsonschema.exceptions.ValidationError as e:
            error_msg = f"Campaign intent validation failed: {e.message}"
            logger.error(error_msg)
            raise LLMParsingError(error_msg) from e

        # Collapse duplicate channels, keeping first-seen order
        if "channels" in data:
            data["channels"] = list(dict.fromkeys(data["channels"]))

        intent = CampaignIntent.from_dict(data)

        if not intent.needs_clarification:
            self._check_complete(intent)

        logger.info(
            f"Campaign intent validated (needs_clarification={intent.needs_clarification}, "
            f"channels={intent.channels})"
        )
        return intent

    def parse(self, raw_text: str) -> CampaignIntent:
        """
        Extract the intent object from raw LLM output and validate it.

        Args:
            raw_text (str): Raw LLM response

        Returns:
            CampaignIntent: The validated intent

        Raises:
            LLMParsingError: If extraction or validation fails; raw_output carries the response
        """
        try:
            return self.validate(extract_json_object(raw_text))
        except LLMParsingError as e:
            if e.raw_output is None:
                e.raw_output = raw_text
            raise

    @staticmethod
    def _check_complete(intent: CampaignIntent) -> None:
        missing = []
        if not intent.goal or not intent.goal.strip():
            missing.append("goal")
        if not intent.channels:
            missing.append("channels")
        if not intent.content_spec.key_message or not intent.content_spec.key_message.strip():
            missing.append("contentSpec.keyMessage")

        if missing:
            error_msg = (
                f"Campaign intent is marked complete but is missing: {', '.join(missing)}"
            )
            logger.error(error_msg)
            raise LLMParsingError(error_msg)
