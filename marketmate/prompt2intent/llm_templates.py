"""
LLM prompt templates and response extraction for intent parsing.

This module builds the prompt that asks the LLM to turn a marketing request
into a campaign intent, and provides the JSON extraction used on every LLM
response in the package.
"""
import re
import json
from typing import Dict, Any, List, Optional

from marketmate.core.logging_config import get_logger
from marketmate.core.error_handler import LLMParsingError

# Initialize logger
logger = get_logger(__name__)

INTENT_PROMPT_TEMPLATE = """You are an AI marketing assistant that parses user prompts into structured campaign data.

Conversation History:
{history}

Current User Prompt: {prompt}

Parse the user's marketing campaign request into structured JSON format. Extract:
- Campaign goal (what they want to achieve)
- Channels (email, social, ppc, sms)
- Content specifications (tone, key message, CTA)
- Audience criteria (demographics, interests, location)
- Budget (if mentioned)
- Schedule (start/end dates if mentioned)

If critical information is missing (like goal, channels, or key message), set needsClarification to true and provide 2-3 specific clarification questions.

Use conversation history for context. If the user is answering previous questions, incorporate that information.

{format_instructions}

Output:"""

NO_HISTORY_TEXT = "No previous conversation"

_decoder = json.JSONDecoder()


def _strip_code_fences(text: str) -> str:
    cleaned = re.sub(r'^\s*```(?:json)?\s*', '', text)
    return re.sub(r'\s*```\s*$', '', cleaned)


def _extract_first(text: str, opener: str, expected_type: type, label: str) -> Any:
    if not text:
        error_msg = "Empty LLM response received"
        logger.error(error_msg)
        raise LLMParsingError(error_msg, raw_output=text)

    cleaned = _strip_code_fences(text)
    index = cleaned.find(opener)
    while index != -1:
        try:
            value, _ = _decoder.raw_decode(cleaned, index)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, expected_type):
            return value
        index = cleaned.find(opener, index + 1)

    error_msg = f"No JSON {label} found in LLM response"
    logger.error(error_msg)
    logger.debug(f"Problematic LLM response: {text[:500]}")
    raise LLMParsingError(error_msg, raw_output=text)


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Find and parse the first top-level JSON object in free text.

    Each '{' is tried as the start of a complete JSON value, so prose before
    and after the object is ignored and braces inside string values do not
    confuse the match.

    Args:
        text (str): Raw LLM response

    Returns:
        Dict[str, Any]: The parsed object

    Raises:
        LLMParsingError: If the text contains no parseable JSON object
    """
    return _extract_first(text, "{", dict, "object")


def extract_json_array(text: str) -> List[Any]:
    """
    Find and parse the first top-level JSON array in free text.

    Args:
        text (str): Raw LLM response

    Returns:
        List[Any]: The parsed array

    Raises:
        LLMParsingError: If the text contains no parseable JSON array
    """
    return _extract_first(text, "[", list, "array")


def format_conversation_history(history: Optional[List[Dict[str, str]]]) -> str:
    """
    Render prior turns as a plain transcript, one "role: content" line per message.

    Args:
        history (List[Dict[str, str]], optional): Messages with "role" and "content"

    Returns:
        str: The transcript, or a placeholder when there is no history
    """
    if not history:
        return NO_HISTORY_TEXT
    return "\n".join(f"{message['role']}: {message['content']}" for message in history)


def generate_intent_prompt(
    user_prompt: str,
    history: Optional[List[Dict[str, str]]],
    format_instructions: str
) -> str:
    """
    Generate the prompt for intent parsing.

    Args:
        user_prompt (str): The current user message
        history (List[Dict[str, str]], optional): Prior conversation turns
        format_instructions (str): Machine-readable output format instructions

    Returns:
        str: The rendered prompt
    """
    return INTENT_PROMPT_TEMPLATE.format(
        history=format_conversation_history(history),
        prompt=user_prompt,
        format_instructions=format_instructions
    )
