"""Configuration management."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..utils import ConfigurationError
from .models import Config

# Environment variables consulted when no configuration file exists.
ENV_BOT_USER_ID = "BOT_USER_ID"
ENV_BOT_TOKEN = "SLACK_BOT_TOKEN"
ENV_SIGNING_SECRET = "SIGNING_SECRET"
ENV_PORT = "PORT"
ENV_TMDB_TOKEN = "TMDB_API_TOKEN"
ENV_QUEUE_PATH = "QUEUE_PATH"
ENV_LOG_LEVEL = "LOG_LEVEL"


class ConfigManager:
    """Manages application configuration loading and validation."""

    def __init__(self, config_path: Optional[Path] = None, load_env_file: bool = True):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file. If None, searches standard
                locations and falls back to environment variables.
            load_env_file: Load a ``.env`` file into the environment first.
        """
        self._config_path = config_path
        self._config: Optional[Config] = None
        self._load_env_file = load_env_file

    def load_config(self) -> Config:
        """Load and validate configuration.

        Returns:
            Validated configuration object.

        Raises:
            FileNotFoundError: If an explicit configuration file is missing.
            ConfigurationError: If configuration is invalid.
            yaml.YAMLError: If YAML parsing fails.
        """
        if self._config is not None:
            return self._config

        if self._load_env_file:
            load_dotenv()

        config_path = self._find_config_file()
        if config_path is not None:
            raw_config = self._load_yaml_file(config_path)
        else:
            raw_config = self._config_from_environment()

        try:
            self._config = Config(**raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        return self._config

    def reload_config(self) -> Config:
        """Reload configuration from file.

        Returns:
            Newly loaded configuration object.
        """
        self._config = None
        return self.load_config()

    def get_config(self) -> Config:
        """Get current configuration, loading if necessary.

        Returns:
            Current configuration object.
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def _find_config_file(self) -> Optional[Path]:
        """Find configuration file in standard locations.

        Returns:
            Path to configuration file, or None if no file exists.

        Raises:
            FileNotFoundError: If an explicitly given file does not exist.
        """
        if self._config_path is not None:
            if self._config_path.exists():
                return self._config_path
            raise FileNotFoundError(f"Configuration file not found: {self._config_path}")

        search_paths = [
            Path.cwd() / "config" / "config.yaml",
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "movie_queue_bot" / "config.yaml",
        ]

        env_config = os.getenv("MOVIE_QUEUE_BOT_CONFIG")
        if env_config:
            search_paths.insert(0, Path(env_config))

        for path in search_paths:
            if path.exists():
                return path

        return None

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load YAML file with environment variable expansion.

        Args:
            path: Path to YAML file.

        Returns:
            Parsed YAML data with environment variables expanded.

        Raises:
            yaml.YAMLError: If YAML parsing fails.
        """
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        content = os.path.expandvars(content)

        try:
            result = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}")

        if not isinstance(result, dict):
            raise yaml.YAMLError(f"YAML file {path} must contain a dictionary at root level")
        return result

    def _config_from_environment(self) -> Dict[str, Any]:
        """Build raw configuration from process environment variables.

        Returns:
            Raw configuration dictionary.

        Raises:
            ConfigurationError: If a required variable is missing.
        """
        missing = [name for name in (ENV_BOT_USER_ID, ENV_TMDB_TOKEN) if not os.getenv(name)]
        if missing:
            raise ConfigurationError(
                "No configuration file found and required environment variables are "
                f"missing: {', '.join(missing)}"
            )

        raw: Dict[str, Any] = {
            "bot": {
                "user_id": os.environ[ENV_BOT_USER_ID],
                "token": os.getenv(ENV_BOT_TOKEN),
                "signing_secret": os.getenv(ENV_SIGNING_SECRET),
            },
            "tmdb": {"api_token": os.environ[ENV_TMDB_TOKEN]},
            "queue": {},
            "logging": {},
        }
        if os.getenv(ENV_PORT):
            raw["bot"]["port"] = os.environ[ENV_PORT]
        if os.getenv(ENV_QUEUE_PATH):
            raw["queue"]["path"] = os.environ[ENV_QUEUE_PATH]
        if os.getenv(ENV_LOG_LEVEL):
            raw["logging"]["level"] = os.environ[ENV_LOG_LEVEL]
        return raw

    @classmethod
    def create_default_config(cls, output_path: Path) -> None:
        """Create a default configuration file.

        Args:
            output_path: Path where to create the configuration file.
        """
        default_config = {
            "bot": {
                "user_id": "${BOT_USER_ID}",
                "token": "${SLACK_BOT_TOKEN}",
                "signing_secret": "${SIGNING_SECRET}",
                "port": 3000,
            },
            "tmdb": {
                "api_token": "${TMDB_API_TOKEN}",
                "language": "en-US",
                "timeout": 10,
            },
            "queue": {
                "path": "./data/queue.json",
                "flush_retry_attempts": 3,
            },
            "logging": {
                "level": "INFO",
            },
        }

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(default_config, f, default_flow_style=False, indent=2, sort_keys=False)

    def validate_config_file(self, config_path: Path) -> bool:
        """Validate a configuration file without loading it as current config.

        Args:
            config_path: Path to configuration file to validate.

        Returns:
            True if configuration is valid, False otherwise.
        """
        try:
            raw_config = self._load_yaml_file(config_path)
            Config(**raw_config)
            return True
        except (ValidationError, yaml.YAMLError, FileNotFoundError):
            return False
