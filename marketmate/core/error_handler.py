"""
Error handling module.

This module defines the exceptions raised across the campaign pipeline and a
few helpers for turning transport and payload problems into them.

The split that matters to callers:
- GenerationUnavailableError: the LLM could not be reached (network, timeout,
  quota, HTTP error). Worth a "try again later".
- LLMParsingError: the LLM answered, but the answer was not usable JSON or did
  not match the expected shape.
- ValidationError: user input was rejected before any LLM call.
"""

import logging
import traceback
from typing import Dict, Any, Optional, Callable, List
import requests

logger = logging.getLogger(__name__)

class APIError(Exception):
    """
    Exception raised for API errors.

    Attributes:
        message: Error message.
        status_code: HTTP status code.
        response: API response.
        endpoint: API endpoint.
        request_data: Request data.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[Any] = None,
        endpoint: Optional[str] = None,
        request_data: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.response = response
        self.endpoint = endpoint
        self.request_data = request_data

        detailed_message = f"API Error: {message}"
        if status_code:
            detailed_message += f" (Status Code: {status_code})"
        if endpoint:
            detailed_message += f" (Endpoint: {endpoint})"

        super().__init__(detailed_message)


class GenerationUnavailableError(APIError):
    """
    Exception raised when the LLM service cannot produce a completion.

    Covers connection failures, timeouts, quota and other HTTP errors, and
    responses that carry no completion text at all.
    """
    pass


class LLMParsingError(Exception):
    """
    Exception raised when an LLM response cannot be turned into the expected structure.

    Attributes:
        message: Error message.
        raw_output: The raw model output, kept for error reports only.
    """

    def __init__(self, message: str, raw_output: Optional[str] = None):
        self.message = message
        self.raw_output = raw_output
        super().__init__(f"LLM Parsing Error: {message}")


class ValidationError(Exception):
    """
    Exception raised for validation errors.

    Attributes:
        message: Error message.
        field: Field that failed validation.
        value: Value that failed validation.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None
    ):
        self.message = message
        self.field = field
        self.value = value

        detailed_message = f"Validation Error: {message}"
        if field:
            detailed_message += f" (Field: {field})"

        super().__init__(detailed_message)


class ConfigurationError(Exception):
    """
    Exception raised for configuration errors.

    Attributes:
        message: Error message.
        component: Component that has a configuration error.
        missing_keys: Keys that are missing from the configuration.
    """

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        missing_keys: Optional[list] = None
    ):
        self.message = message
        self.component = component
        self.missing_keys = missing_keys or []

        detailed_message = f"Configuration Error: {message}"
        if component:
            detailed_message += f" (Component: {component})"
        if missing_keys:
            detailed_message += f" (Missing Keys: {', '.join(missing_keys)})"

        super().__init__(detailed_message)


class ContentGenerationError(Exception):
    """
    User-facing failure of a single channel's content generation.

    The message never contains model output; the underlying error is kept on
    `cause` for logging.

    Attributes:
        channel: Channel label used in the message (e.g. "email", "PPC").
        cause: The exception that made generation fail.
    """

    def __init__(self, channel: str, cause: Optional[Exception] = None):
        self.channel = channel
        self.cause = cause
        self.message = f"Failed to generate {channel} content. Please try again."
        super().__init__(self.message)


class CampaignGenerationError(Exception):
    """
    Raised when no requested channel produced content.

    Attributes:
        message: Error message.
        errors: One entry per failed channel.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)


class CampaignLaunchError(Exception):
    """
    Raised when a campaign could not be launched on any channel.

    Attributes:
        message: Error message.
        launch_results: Per-channel launch results.
    """

    def __init__(self, message: str, launch_results: Optional[List[Dict[str, Any]]] = None):
        self.message = message
        self.launch_results = launch_results or []
        super().__init__(message)


class AnalyticsError(Exception):
    """Raised when campaign analytics insights cannot be generated."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(Exception):
    """
    Raised when a record does not exist or belongs to another user.

    Attributes:
        message: Error message.
        resource: Identifier that was looked up.
    """

    def __init__(self, message: str, resource: Optional[str] = None):
        self.message = message
        self.resource = resource
        super().__init__(message)


def handle_api_request(
    request_func: Callable,
    endpoint: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    error_message: str = "API request failed",
    timeout: Optional[float] = None
) -> Dict[str, Any]:
    """
    Make an API request and translate transport failures.

    Args:
        request_func: Function to make the API request (e.g. requests.post).
        endpoint: API endpoint.
        payload: Request payload.
        headers: Request headers.
        error_message: Error message prefix used if the request fails.
        timeout: Seconds before the request is aborted.

    Returns:
        Parsed JSON response.

    Raises:
        GenerationUnavailableError: If the request fails for any reason.
    """
    response = None
    try:
        response = request_func(
            endpoint,
            json=payload,
            headers=headers,
            timeout=timeout
        )

        response.raise_for_status()

        return response.json()

    except requests.exceptions.HTTPError as e:
        # A mocked HTTPError may not carry a response
        if getattr(e, 'response', None) is not None:
            status_code = e.response.status_code
            response_text = e.response.text
        else:
            status_code = getattr(response, 'status_code', None)
            response_text = getattr(response, 'text', str(e))

        logger.error(f"HTTP error: {e}")
        logger.error(f"Response: {response_text}")

        raise GenerationUnavailableError(
            message=f"{error_message}: {e}",
            status_code=status_code,
            response=response_text,
            endpoint=endpoint,
            request_data=payload
        )

    except requests.exceptions.Timeout as e:
        logger.error(f"Timeout error: {e}")

        raise GenerationUnavailableError(
            message=f"{error_message}: Request timed out",
            endpoint=endpoint,
            request_data=payload
        )

    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error: {e}")

        raise GenerationUnavailableError(
            message=f"{error_message}: Connection error",
            endpoint=endpoint,
            request_data=payload
        )

    except requests.exceptions.RequestException as e:
        logger.error(f"Request error: {e}")

        raise GenerationUnavailableError(
            message=f"{error_message}: {e}",
            endpoint=endpoint,
            request_data=payload
        )

    except ValueError as e:
        # response.json() failed; json.JSONDecodeError is a ValueError
        logger.error(f"Failed to parse API response: {e}")
        logger.debug(traceback.format_exc())

        raise GenerationUnavailableError(
            message=f"{error_message}: Failed to parse API response: {e}",
            status_code=getattr(response, 'status_code', None),
            response=getattr(response, 'text', None),
            endpoint=endpoint,
            request_data=payload
        )


def validate_required_fields(
    data: Dict[str, Any],
    required_fields: list,
    component: str = "Unknown"
) -> None:
    """
    Validate that required fields are present and non-empty in the data.

    Args:
        data: Data to validate.
        required_fields: List of required field names.
        component: Component name for error reporting.

    Raises:
        ValidationError: If a required field is missing or empty.
    """
    missing_fields = []

    for field in required_fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing_fields.append(field)

    if missing_fields:
        logger.debug(f"{component}: missing required fields {missing_fields}")
        raise ValidationError(
            message=f"Missing required fields: {', '.join(missing_fields)}",
            field=missing_fields[0]
        )


def log_api_error(error: APIError) -> None:
    """
    Log an API error with detailed information.

    Args:
        error: API error to log.
    """
    logger.error(f"API Error: {error.message}")

    if error.status_code:
        logger.error(f"Status Code: {error.status_code}")

    if error.endpoint:
        logger.error(f"Endpoint: {error.endpoint}")

    if error.response:
        logger.error(f"Response: {error.response}")

    if error.request_data:
        safe_request_data = error.request_data.copy()

        for key in safe_request_data:
            if "key" in key.lower() or "token" in key.lower() or "secret" in key.lower() or "password" in key.lower():
                safe_request_data[key] = "***REDACTED***"

        # Prompts can be long; the model name is what matters here
        if "messages" in safe_request_data:
            safe_request_data["messages"] = f"[{len(safe_request_data['messages'])} message(s)]"

        logger.error(f"Request Data: {safe_request_data}")
