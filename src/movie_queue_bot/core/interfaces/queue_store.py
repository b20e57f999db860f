"""Queue store interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Movie


class IQueueStore(ABC):
    """Interface for the persisted movie queue."""

    @abstractmethod
    def list_movies(self) -> List[Movie]:
        """Get a snapshot of the queue, oldest request first."""
        pass

    @abstractmethod
    async def add(self, movie: Movie) -> None:
        """Append a movie and persist the queue.

        Args:
            movie: Movie to append.

        Raises:
            QueueStoreError: If the queue could not be persisted.
        """
        pass

    @abstractmethod
    async def remove(self, title_query: str) -> Optional[Movie]:
        """Remove the first movie whose title contains the query.

        Args:
            title_query: Case-insensitive title fragment.

        Returns:
            Removed movie, or None if nothing matched.

        Raises:
            QueueStoreError: If the queue could not be persisted.
        """
        pass

    @abstractmethod
    async def load(self) -> None:
        """Load the queue from durable storage.

        Raises:
            QueueStoreError: If the stored queue is unreadable or malformed.
        """
        pass

    @abstractmethod
    async def flush(self) -> None:
        """Write the full queue to durable storage.

        Raises:
            QueueStoreError: If the queue could not be persisted.
        """
        pass
