"""Configuration data models."""

import os
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BotConfig(BaseModel):
    """Chat bot identity and transport credentials."""

    user_id: str = Field(..., min_length=1, description="The bot's own user id, used for mentions")
    token: Optional[str] = Field(default=None, description="Bot token for the chat transport")
    signing_secret: Optional[str] = Field(
        default=None, description="Signing secret for the chat transport"
    )
    port: int = Field(default=3000, gt=0, lt=65536, description="Listen port")

    @field_validator("user_id", "token", "signing_secret")
    @classmethod
    def expand_env(cls, v: Optional[str]) -> Optional[str]:
        """Expand environment variables in credentials."""
        return os.path.expandvars(v) if v is not None else v


class TMDbConfig(BaseModel):
    """TMDb API configuration."""

    api_token: str = Field(..., min_length=1, description="TMDb API read access (bearer) token")
    base_url: str = Field(default="https://api.themoviedb.org/3", description="TMDb API base URL")
    language: str = Field(default="en-US", description="Language for search results")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")

    @field_validator("api_token")
    @classmethod
    def validate_api_token(cls, v: str) -> str:
        """Expand environment variables in API token."""
        return os.path.expandvars(v)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL."""
        return v.rstrip("/")


class QueueConfig(BaseModel):
    """Movie queue persistence configuration."""

    path: str = Field(default="./data/queue.json", description="Path of the queue JSON file")
    flush_retry_attempts: int = Field(
        default=3, ge=1, description="Attempts made to write the queue before giving up"
    )
    flush_retry_wait: float = Field(
        default=0.5, ge=0.0, description="Initial wait between write attempts in seconds"
    )

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand environment variables and ~ in the queue path."""
        return os.path.expanduser(os.path.expandvars(v))


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    file: Optional[str] = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, gt=0, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Logging level must be one of: {allowed}")
        return v.upper()


class Config(BaseModel):
    """Main configuration model."""

    bot: BotConfig = Field(..., description="Chat bot configuration")
    tmdb: TMDbConfig = Field(..., description="TMDb configuration")
    queue: QueueConfig = Field(default_factory=QueueConfig, description="Queue configuration")
    responses: Dict[str, List[str]] = Field(
        default_factory=dict, description="Reply phrasing overrides keyed by template name"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
    )

    @field_validator("responses")
    @classmethod
    def validate_responses(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        """Reject empty phrasing lists."""
        for key, phrasings in v.items():
            if not phrasings:
                raise ValueError(f"Response template '{key}' needs at least one phrasing")
        return v
