"""Custom exceptions for the application."""


class MovieQueueBotError(Exception):
    """Base exception for all application errors."""

    pass


class ConfigurationError(MovieQueueBotError):
    """Configuration-related errors."""

    pass


class CatalogServiceError(MovieQueueBotError):
    """Catalog (TMDb) transport or API errors."""

    pass


class QueueStoreError(MovieQueueBotError):
    """Queue persistence errors: unreadable, malformed or unwritable store."""

    pass


class CommandRouterError(MovieQueueBotError):
    """Command router errors."""

    pass
