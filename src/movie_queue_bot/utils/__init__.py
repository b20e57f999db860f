"""Utility functions and classes."""

from .exceptions import (
    CatalogServiceError,
    CommandRouterError,
    ConfigurationError,
    MovieQueueBotError,
    QueueStoreError,
)
from .text_utils import (
    clean_query,
    fill_template,
    format_mention,
    mentions_user,
    normalize_quotes,
)

__all__ = [
    "MovieQueueBotError",
    "ConfigurationError",
    "CatalogServiceError",
    "QueueStoreError",
    "CommandRouterError",
    "normalize_quotes",
    "clean_query",
    "mentions_user",
    "format_mention",
    "fill_template",
]
