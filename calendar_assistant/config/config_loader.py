"""Load the YAML config, expanding ${VAR} references from the environment."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .config_schema import AppConfig

logger = logging.getLogger(__name__)

# ${NAME} or ${NAME:-fallback}
ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def expand_env(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """
    Replace ${NAME} and ${NAME:-fallback} inside every string of a parsed config.

    Secrets such as the Slack bot token can then stay in the environment
    while the rest of the config lives in YAML.

    Raises:
        ValueError: If a referenced variable is unset and has no fallback
    """
    env = os.environ if environ is None else environ

    if isinstance(value, dict):
        return {key: expand_env(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item, env) for item in value]
    if not isinstance(value, str):
        return value

    def substitute(match: re.Match) -> str:
        name, fallback = match.group(1), match.group(2)
        if name in env:
            return env[name]
        if fallback is not None:
            return fallback
        raise ValueError(f"Environment variable {name} is referenced in the config but not set")

    return ENV_REFERENCE.sub(substitute, value)


def from_dict(config: dict, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build a validated AppConfig from a parsed YAML mapping.

    Raises:
        ValueError: If config is invalid or references an unset variable
    """
    app_config = AppConfig(**expand_env(config, environ))
    app_config.validate()
    return app_config


def load_config(path: str = "config.yaml") -> AppConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is empty or invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f)

    if not config_dict:
        raise ValueError("Configuration file is empty")

    logger.debug(f"Loaded config sections: {sorted(config_dict)}")
    return from_dict(config_dict)
