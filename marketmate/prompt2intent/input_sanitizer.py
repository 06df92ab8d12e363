"""
Sanitization of user-supplied text before it is embedded in an LLM prompt.

Rejected input raises ValidationError so it never reaches the model.
"""

import re
from typing import Dict, List

from marketmate.core.logging_config import get_logger
from marketmate.core.constants import DEFAULT_MAX_INPUT_LENGTH
from marketmate.core.error_handler import ValidationError

# Initialize logger
logger = get_logger(__name__)

PROMPT_INJECTION_PATTERNS = [
    re.compile(r"ignore\s+(previous|all)\s+instructions?", re.IGNORECASE),
    re.compile(r"disregard\s+(previous|all)\s+instructions?", re.IGNORECASE),
    re.compile(r"forget\s+(previous|all)\s+instructions?", re.IGNORECASE),
    re.compile(r"system\s*:", re.IGNORECASE),
    re.compile(r"assistant\s*:", re.IGNORECASE),
    re.compile(r"<\s*script\s*>", re.IGNORECASE),
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"eval\s*\(", re.IGNORECASE),
]

SUSPICIOUS_KEYWORDS = [
    "database",
    "password",
    "secret",
    "api key",
    "token",
    "admin",
    "root",
    "delete all",
    "drop table",
    "truncate",
]

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1F\x7F]")


def sanitize_input(
    text: str,
    max_length: int = DEFAULT_MAX_INPUT_LENGTH,
    allow_html: bool = False,
    check_prompt_injection: bool = True
) -> str:
    """
    Sanitize a piece of user input.

    Args:
        text (str): Raw user input
        max_length (int): Maximum length after trimming
        allow_html (bool): Keep HTML tags instead of stripping them
        check_prompt_injection (bool): Reject text matching known prompt-injection patterns

    Returns:
        str: Sanitized text on a single line

    Raises:
        ValidationError: If the input is empty, too long or looks like a prompt injection
    """
    sanitized = (text or "").strip()

    if len(sanitized) > max_length:
        raise ValidationError(
            f"Input exceeds maximum length of {max_length} characters",
            field="prompt"
        )

    if not sanitized:
        raise ValidationError("Input cannot be empty", field="prompt")

    if not allow_html:
        sanitized = _TAG_PATTERN.sub("", sanitized)

    if check_prompt_injection:
        for pattern in PROMPT_INJECTION_PATTERNS:
            if pattern.search(sanitized):
                logger.warning(f"Rejected input matching pattern {pattern.pattern!r}")
                raise ValidationError(
                    "Input contains potentially malicious content",
                    field="prompt"
                )

        lowered = sanitized.lower()
        found_keywords = [keyword for keyword in SUSPICIOUS_KEYWORDS if keyword in lowered]
        if len(found_keywords) >= 2:
            logger.warning(
                f"Suspicious input detected: keywords={found_keywords}, preview={sanitized[:100]!r}"
            )

    # Newlines and tabs become spaces; other control characters are dropped
    sanitized = _WHITESPACE_PATTERN.sub(" ", sanitized)
    sanitized = _CONTROL_CHAR_PATTERN.sub("", sanitized)

    return sanitized.strip()


def sanitize_conversation_history(history: List[Dict[str, str]]) -> List[Dict[str, str]]:
    """
    Sanitize prior conversation turns.

    Roles other than "user" and "assistant" are coerced to "user". Content is
    sanitized without prompt-injection checks, since assistant turns may
    legitimately contain text like "assistant:".

    Args:
        history (List[Dict[str, str]]): Messages with "role" and "content"

    Returns:
        List[Dict[str, str]]: Sanitized messages

    Raises:
        ValidationError: If any message is empty or too long
    """
    sanitized = []
    for message in history or []:
        role = message.get("role")
        sanitized.append({
            "role": role if role in ("user", "assistant") else "user",
            "content": sanitize_input(message.get("content", ""), check_prompt_injection=False)
        })
    return sanitized
