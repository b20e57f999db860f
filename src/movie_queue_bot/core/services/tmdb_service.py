"""TMDb catalog service implementation."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import CatalogServiceError
from ..interfaces import ICatalogService
from ..models import CatalogCandidate


class TMDbService(ICatalogService, LoggerMixin):
    """Looks movies up through the TMDb search API."""

    def __init__(self, config: Config) -> None:
        """Initialize TMDb service.

        Args:
            config: Application configuration.
        """
        self._tmdb_config = config.tmdb
        self._session: Optional[aiohttp.ClientSession] = None

    async def search(self, title: str) -> List[CatalogCandidate]:
        """Search TMDb for movies matching a title.

        Only the first result page is requested, adult titles are excluded.

        Args:
            title: Title to search for.

        Returns:
            Candidates in the order TMDb returned them.

        Raises:
            CatalogServiceError: If the request fails, times out or returns
                an unexpected payload.
        """
        url = f"{self._tmdb_config.base_url}/search/movie"
        params = {
            "query": title,
            "include_adult": "false",
            "language": self._tmdb_config.language,
            "page": "1",
        }

        try:
            async with self._get_session().get(url, params=params) as response:
                response.raise_for_status()
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            error_msg = f"TMDb search for '{title}' failed: {e!r}"
            self.logger.error(error_msg)
            raise CatalogServiceError(error_msg) from e

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            error_msg = f"TMDb search for '{title}' returned an unexpected payload"
            self.logger.error(error_msg)
            raise CatalogServiceError(error_msg)

        try:
            candidates = [self._parse_movie_result(result) for result in results]
        except (AttributeError, TypeError, ValidationError) as e:
            error_msg = f"TMDb search for '{title}' returned a malformed result: {e}"
            self.logger.error(error_msg)
            raise CatalogServiceError(error_msg) from e

        # Results without any title cannot be queued.
        candidates = [candidate for candidate in candidates if candidate.title.strip()]
        self.logger.debug(f"TMDb returned {len(candidates)} candidate(s) for '{title}'")
        return candidates

    async def resolve(self, query: str) -> Optional[CatalogCandidate]:
        """Resolve a query to the most voted-on matching movie.

        Args:
            query: Title to look up.

        Returns:
            Top-ranked candidate, or None if TMDb found nothing.

        Raises:
            CatalogServiceError: If the request fails.
        """
        candidates = self.rank_candidates(await self.search(query))
        if not candidates:
            self.logger.info(f"No TMDb match for '{query}'")
            return None

        best = candidates[0]
        self.logger.info(f"Resolved '{query}' to '{best.title}' ({best.release_year})")
        return best

    @staticmethod
    def rank_candidates(candidates: List[CatalogCandidate]) -> List[CatalogCandidate]:
        """Order candidates by vote count, most voted first.

        Ties keep the catalog's own order.
        """
        return sorted(candidates, key=lambda c: c.vote_count, reverse=True)

    def _parse_movie_result(self, data: Dict[str, Any]) -> CatalogCandidate:
        """Parse a TMDb search result.

        Args:
            data: TMDb movie data.

        Returns:
            CatalogCandidate object.
        """
        return CatalogCandidate(
            title=data.get("title") or data.get("original_title") or "",
            release_date=data.get("release_date") or None,
            overview=data.get("overview") or "",
            vote_count=data.get("vote_count") or 0,
            popularity=data.get("popularity"),
            tmdb_id=data.get("id"),
        )

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session.

        Returns:
            HTTP session.
        """
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._tmdb_config.timeout)
            headers = {
                "Authorization": f"Bearer {self._tmdb_config.api_token}",
                "Accept": "application/json",
            }
            self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "TMDbService":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
