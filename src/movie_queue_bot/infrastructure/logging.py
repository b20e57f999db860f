"""Logging setup for the bot process."""

import logging
import logging.handlers
from pathlib import Path
from typing import List

from ..config.models import LoggingConfig

# Libraries that log every request or loop event at INFO/DEBUG.
NOISY_LOGGERS = ("aiohttp", "aiohttp.access", "asyncio")


def _build_handlers(config: LoggingConfig) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=config.max_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )

    return handlers


def setup_logging(config: LoggingConfig) -> None:
    """Route all bot logging through the configured handlers.

    Replaces any handlers already on the root logger, so calling this again
    with a different config (``--verbose``) takes effect immediately.

    Args:
        config: Logging section of the bot configuration.
    """
    level = getattr(logging, config.level)
    formatter = logging.Formatter(config.format)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    for handler in _build_handlers(config):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).debug(
        f"Logging configured with level {config.level}"
        + (f", writing to {config.file}" if config.file else "")
    )


class LoggerMixin:
    """Gives services a logger named after their module and class."""

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")
