"""Configuration management module."""

from .config_loader import expand_env, from_dict, load_config
from .config_schema import AppConfig
from .profiles import CalendarRoute, ProfileDirectory, UserProfile

__all__ = [
    "expand_env",
    "from_dict",
    "load_config",
    "AppConfig",
    "CalendarRoute",
    "ProfileDirectory",
    "UserProfile",
]
