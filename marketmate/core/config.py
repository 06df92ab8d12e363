"""
Configuration management utilities for the marketmate package.

This module provides functions for loading and accessing configuration settings.

Configuration Hierarchy:
1. Default configuration (marketmate/core/default_config.json) - Base settings shipped with the package
2. User configuration (~/.marketmate/config.json) - Per-user overrides that persist across runs
3. Runtime overrides - Process-only changes made via set_config_value()

The default configuration holds model names, timeouts and temperatures for the
LLM-backed components. The user configuration is the place for a different
model, a database URL or the list of connected launch integrations. API keys
never live in either file; they come from the environment (see credentials.py).
"""

import os
import json
from typing import Dict, Any

# Default configuration paths
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "default_config.json")
USER_CONFIG_PATH = os.path.expanduser("~/.marketmate/config.json")

# Configuration singleton
_config_cache = {}

def get_config(reload: bool = False) -> Dict[str, Any]:
    """
    Get the configuration dictionary, loading it if necessary.

    Args:
        reload (bool): Force reload the configuration even if cached

    Returns:
        Dict[str, Any]: The configuration dictionary
    """
    global _config_cache

    if not _config_cache or reload:
        _config_cache = load_config()

    return _config_cache

def load_config() -> Dict[str, Any]:
    """
    Load configuration from default and user-specific files.

    The default configuration is loaded first. If a user configuration exists at
    USER_CONFIG_PATH it is deep merged on top, so a user file only needs to name
    the values it changes, e.g. {"llm": {"model": "anthropic/claude-haiku-4.5"}}.

    Returns:
        Dict[str, Any]: The merged configuration dictionary
    """
    config = {}

    if os.path.exists(DEFAULT_CONFIG_PATH):
        with open(DEFAULT_CONFIG_PATH, 'r') as f:
            config.update(json.load(f))

    if os.path.exists(USER_CONFIG_PATH):
        with open(USER_CONFIG_PATH, 'r') as f:
            user_config = json.load(f)
            deep_merge(config, user_config)

    return config

def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """
    Recursively merge override dictionary into base dictionary.

    - If a key exists in both dictionaries and both values are dictionaries,
      recursively merge those dictionaries
    - Otherwise, the value from the override dictionary takes precedence

    Args:
        base (Dict[str, Any]): Base dictionary to be updated
        override (Dict[str, Any]): Dictionary with values to override
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value

def get_config_value(key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value by key.

    Dot notation reaches nested values: 'llm.timeout' reads
    config['llm']['timeout']. A missing key at any level returns the default.

    Examples:
        >>> get_config_value('llm.model', 'openai/gpt-4o-mini')
        'openai/gpt-4o-mini'

        >>> get_config_value('nonexistent.key', 'default-value')
        'default-value'

    Args:
        key (str): The configuration key (can use dot notation for nested keys)
        default (Any): Default value if key is not found

    Returns:
        Any: The configuration value or default
    """
    config = get_config()

    if '.' in key:
        parts = key.split('.')
        current = config

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    return config.get(key, default)

def set_config_value(key: str, value: Any) -> None:
    """
    Override a configuration value for the current process.

    Intermediate dictionaries are created as needed. Nothing is written to disk;
    persistent changes belong in the user configuration file. The CLI uses this
    for --model.

    Args:
        key (str): The configuration key (can use dot notation for nested keys)
        value (Any): The value to set
    """
    config = get_config()

    if '.' in key:
        parts = key.split('.')
        current = config

        for part in parts[:-1]:
            if part not in current or not isinstance(current[part], dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = value
    else:
        config[key] = value

    global _config_cache
    _config_cache = config
