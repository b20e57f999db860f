"""Core interfaces for dependency injection."""

from .catalog_service import ICatalogService
from .command_router import ICommandRouter
from .messenger import IMessenger
from .queue_store import IQueueStore

__all__ = [
    "ICatalogService",
    "IQueueStore",
    "IMessenger",
    "ICommandRouter",
]
