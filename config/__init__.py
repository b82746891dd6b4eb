"""Configuration module for ChurnGuard."""

import os
from pathlib import Path
from typing import Optional

import yaml

# Project root directory
ROOT_DIR = Path(__file__).parent.parent.absolute()

# Load configuration
CONFIG_PATH = Path(__file__).parent / "config.yaml"

# Fallback when the configured variable is not set
FALLBACK_API_KEY_ENV = "GEMINI_API_KEY"


class MissingCredentialError(RuntimeError):
    """Raised at startup when no inference credential is available."""


def load_config(path: Optional[Path] = None) -> dict:
    """Load configuration from YAML file."""
    with open(path or CONFIG_PATH, "r") as f:
        config = yaml.safe_load(f)
    return config or {}


def get_config() -> dict:
    """Get configuration dictionary."""
    return load_config()


def get_api_key(config: Optional[dict] = None) -> str:
    """
    Resolve the inference service credential from the environment.

    Args:
        config: Configuration dictionary. If None, loads from config.yaml

    Returns:
        The API key

    Raises:
        MissingCredentialError: If neither the configured variable nor the
            fallback variable holds a non-empty value
    """
    config = config if config is not None else get_config()
    env_name = config.get("inference", {}).get("api_key_env", "API_KEY")

    for name in (env_name, FALLBACK_API_KEY_ENV):
        value = os.environ.get(name, "").strip()
        if value:
            return value

    raise MissingCredentialError(
        f"No inference credential found. Set the {env_name} environment variable."
    )
