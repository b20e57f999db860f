"""Catalog service interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import CatalogCandidate


class ICatalogService(ABC):
    """Interface for movie metadata catalogs."""

    @abstractmethod
    async def search(self, title: str) -> List[CatalogCandidate]:
        """Search the catalog for movies matching a title.

        Args:
            title: Title to search for.

        Returns:
            Candidates in the order the catalog returned them.

        Raises:
            CatalogServiceError: If the request fails.
        """
        pass

    @abstractmethod
    async def resolve(self, query: str) -> Optional[CatalogCandidate]:
        """Resolve a query to the most popular matching movie.

        Args:
            query: Title to look up.

        Returns:
            Top-ranked candidate, or None if the catalog has no match.

        Raises:
            CatalogServiceError: If the request fails.
        """
        pass
