"""
LLM client for the OpenRouter.ai API.

This module provides a client for OpenRouter.ai chat completions. The intent
parser, content generator and analytics analyzer share one client; each
passes its own temperature per call.
"""

import os
import json
import datetime
import requests
from typing import Dict, Any, Optional

from marketmate.core.logging_config import get_logger, log_api_request
from marketmate.core.credentials import get_api_key
from marketmate.core.config import get_config_value
from marketmate.core.error_handler import (
    GenerationUnavailableError,
    ConfigurationError,
    handle_api_request,
    log_api_error
)
from marketmate.core.constants import (
    DEFAULT_LLM_MODEL,
    OPENROUTER_API_ENDPOINT,
    DEFAULT_MAX_TOKENS,
    DEFAULT_LLM_TIMEOUT
)

# Initialize logger
logger = get_logger(__name__)

class OpenRouterLLMClient:
    """
    Client for making completion calls to OpenRouter.ai.

    One call is one HTTP request. The client never retries; callers decide
    what to do with a GenerationUnavailableError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        log_file: Optional[str] = None
    ):
        """
        Initialize the OpenRouter LLM client.

        Args:
            api_key (str, optional): OpenRouter API key. If not provided, will attempt to get from environment.
            model (str, optional): Model to use. If not provided, will use the default from config.
            max_tokens (int, optional): Maximum tokens per completion. If not provided, will use the default from config.
            timeout (float, optional): Seconds before a request is aborted. If not provided, will use the default from config.
            log_file (str, optional): Append every request and response to this JSON log file.

        Raises:
            ConfigurationError: If no API key is available
        """
        # Fail fast if the key is missing
        try:
            self.api_key = api_key or get_api_key("openrouter")
        except ValueError as e:
            logger.error(f"Failed to get OpenRouter API key: {str(e)}")
            raise ConfigurationError(
                "OpenRouter API key is required. Please set the OPENROUTER_API_KEY environment variable.",
                component="OpenRouterLLMClient",
                missing_keys=["OPENROUTER_API_KEY"]
            )

        self.model = model or get_config_value("llm.model", DEFAULT_LLM_MODEL)
        self.max_tokens = max_tokens or get_config_value("llm.max_tokens", DEFAULT_MAX_TOKENS)
        self.timeout = timeout or get_config_value("llm.timeout", DEFAULT_LLM_TIMEOUT)
        self.endpoint = f"{OPENROUTER_API_ENDPOINT}/chat/completions"

        self.log_file = log_file
        if self.log_file:
            logger.info(f"LLM requests and responses will be logged to {self.log_file}")
            os.makedirs(os.path.dirname(os.path.abspath(self.log_file)), exist_ok=True)

        logger.info(f"Initialized {self.__class__.__name__} with model {self.model}")

    def complete(self, prompt: str, temperature: Optional[float] = None) -> str:
        """
        Send a single prompt and return the completion text.

        Args:
            prompt (str): The fully rendered prompt
            temperature (float, optional): Sampling temperature for this call

        Returns:
            str: Raw completion text

        Raises:
            GenerationUnavailableError: If the request fails, times out, or returns no completion
        """
        logger.info(f"Requesting completion from {self.model}")
        logger.debug(f"Prompt: {prompt[:200]}...")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "user", "content": prompt}
            ],
            "max_tokens": self.max_tokens
        }
        if temperature is not None:
            payload["temperature"] = temperature

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        log_api_request(logger, "openrouter", self.endpoint, {"model": self.model, "temperature": temperature})

        if self.log_file:
            self._log_to_file({
                "timestamp": datetime.datetime.now().isoformat(),
                "type": "request",
                "model": self.model,
                "payload": payload
            })

        try:
            result = handle_api_request(
                requests.post,
                self.endpoint,
                payload,
                headers,
                error_message="LLM completion request failed",
                timeout=self.timeout
            )
        except GenerationUnavailableError as e:
            log_api_error(e)
            raise

        if self.log_file:
            self._log_to_file({
                "timestamp": datetime.datetime.now().isoformat(),
                "type": "response",
                "response": result
            })

        content = self._extract_content(result)
        if not content:
            error_msg = "No completion content in LLM response"
            logger.error(error_msg)
            raise GenerationUnavailableError(error_msg, endpoint=self.endpoint)

        logger.debug(f"Completion: {content[:200]}...")
        return content

    @staticmethod
    def _extract_content(result: Dict[str, Any]) -> str:
        """
        Pull the completion text out of a chat-completions response.

        Args:
            result (Dict[str, Any]): Parsed JSON response

        Returns:
            str: Completion text, or an empty string if there is none
        """
        if not isinstance(result, dict):
            return ""

        choices = result.get("choices") or []
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ""

        message = choices[0].get("message")
        if not isinstance(message, dict):
            return ""
        content = message.get("content")

        # Some providers return a list of content parts
        if isinstance(content, list):
            return "".join(
                item.get("text", "")
                for item in content
                if isinstance(item, dict) and item.get("type") == "text"
            )

        return content if isinstance(content, str) else ""

    def _log_to_file(self, data: Dict[str, Any]) -> None:
        """
        Append a record to the request log file.

        Args:
            data (Dict[str, Any]): Data to log
        """
        if not self.log_file:
            return

        try:
            with open(self.log_file, 'a') as f:
                f.write(json.dumps(data, indent=2))
                f.write("\n\n")
        except OSError as e:
            logger.error(f"Error writing to log file {self.log_file}: {str(e)}")
