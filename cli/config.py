"""CLI configuration management."""

import os
from pathlib import Path
from typing import Any, Dict

import yaml

from s3checker.core.config import settings

DEFAULT_CONFIG = {
    "concurrency": settings.DEFAULT_CONCURRENCY,
    "rate_limit": 0,
    "wordlist": None,
    "acl_fallback": False,
    "feeds": True,
    "region": True,
    "exclude_codes": [],
}


def get_config_file() -> Path:
    """Get the config file path.

    Priority:
        1. S3_CHECKER_CONFIG environment variable
        2. ~/.s3-checker.yaml

    Returns:
        Path of the YAML config file.
    """
    env_path = os.getenv("S3_CHECKER_CONFIG")
    if env_path:
        return Path(env_path)
    return Path.home() / ".s3-checker.yaml"


def load_config() -> Dict[str, Any]:
    """Load configuration from file or return defaults.

    Returns:
        Dict containing configuration settings.
    """
    config_file = get_config_file()
    if config_file.exists():
        try:
            with open(config_file, "r") as f:
                config = yaml.safe_load(f) or {}
                # Merge with defaults
                return {**DEFAULT_CONFIG, **config}
        except (OSError, yaml.YAMLError):
            # If config file is corrupt, return defaults
            return DEFAULT_CONFIG.copy()
    return DEFAULT_CONFIG.copy()


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file.

    Args:
        config: Dictionary containing configuration settings.
    """
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, "w") as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)


def parse_value(value: str) -> Any:
    """Parse a ``config set`` value as YAML so numbers, booleans and lists keep their type.

    Examples:
        >>> parse_value("20")
        20
        >>> parse_value("[403, 400]")
        [403, 400]
    """
    try:
        return yaml.safe_load(value)
    except yaml.YAMLError:
        return value
