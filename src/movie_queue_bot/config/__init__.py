"""Configuration management module."""

from .config_manager import ConfigManager
from .models import BotConfig, Config, LoggingConfig, QueueConfig, TMDbConfig

__all__ = [
    "ConfigManager",
    "Config",
    "BotConfig",
    "TMDbConfig",
    "QueueConfig",
    "LoggingConfig",
]
