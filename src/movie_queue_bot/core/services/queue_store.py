"""JSON file backed queue store implementation."""

import asyncio
import json
import uuid
from pathlib import Path
from typing import Callable, List, Optional, Tuple, TypeVar

import aiofiles
import aiofiles.os
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import QueueStoreError
from ..interfaces import IQueueStore
from ..models import Movie

T = TypeVar("T")

# A mutation gets a private copy of the queue and returns the new queue plus
# its result. Returning None as the new queue means "nothing changed".
Mutation = Callable[[List[Movie]], Tuple[Optional[List[Movie]], T]]


class JsonQueueStore(IQueueStore, LoggerMixin):
    """Movie queue persisted as a JSON array.

    All mutations are serialized through one lock. A mutation builds the new
    queue, writes it to disk, and only then replaces the in-memory queue, so
    a failed write leaves both copies at the previous state. Every write goes
    to a temporary file that is renamed over the queue file.
    """

    def __init__(self, config: Config) -> None:
        """Initialize queue store.

        Args:
            config: Application configuration.
        """
        self._queue_config = config.queue
        self._path = Path(config.queue.path)
        self._movies: List[Movie] = []
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """Path of the queue file."""
        return self._path

    def list_movies(self) -> List[Movie]:
        """Get a snapshot of the queue, oldest request first."""
        return list(self._movies)

    def __len__(self) -> int:
        return len(self._movies)

    async def add(self, movie: Movie) -> None:
        """Append a movie and persist the queue.

        Args:
            movie: Movie to append.

        Raises:
            QueueStoreError: If the queue could not be persisted.
        """

        def append(movies: List[Movie]) -> Tuple[List[Movie], None]:
            movies.append(movie)
            return movies, None

        await self._transact(append)
        self.logger.info(f"Added '{movie.title}' to the queue (requested by {movie.requestor})")

    async def remove(self, title_query: str) -> Optional[Movie]:
        """Remove the first movie whose title contains the query.

        Titles are compared case-insensitively, oldest request first.

        Args:
            title_query: Title fragment.

        Returns:
            Removed movie, or None if nothing matched.

        Raises:
            QueueStoreError: If the queue could not be persisted.
        """
        needle = title_query.strip().lower()
        if not needle:
            return None

        def pop_first_match(movies: List[Movie]) -> Tuple[Optional[List[Movie]], Optional[Movie]]:
            for index, movie in enumerate(movies):
                if needle in movie.title.lower():
                    return movies, movies.pop(index)
            return None, None

        removed = await self._transact(pop_first_match)
        if removed is None:
            self.logger.info(f"No queued movie matches '{title_query}'")
        else:
            self.logger.info(f"Removed '{removed.title}' from the queue")
        return removed

    async def load(self) -> None:
        """Load the queue from the JSON file.

        A missing file is an empty queue; the file is created on the first
        write.

        Raises:
            QueueStoreError: If the file is unreadable or malformed.
        """
        async with self._lock:
            if not await aiofiles.os.path.exists(self._path):
                self.logger.warning(f"Queue file {self._path} does not exist, starting empty")
                self._movies = []
                return

            try:
                async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                    content = await f.read()
            except OSError as e:
                raise QueueStoreError(f"Failed to read queue file {self._path}: {e}") from e

            self._movies = self._parse(content)
            self.logger.info(f"Loaded {len(self._movies)} movie(s) from {self._path}")

    async def flush(self) -> None:
        """Write the full queue to the JSON file.

        Raises:
            QueueStoreError: If the queue could not be persisted.
        """
        async with self._lock:
            await self._write_snapshot(self._movies)

    def _parse(self, content: str) -> List[Movie]:
        """Parse queue file content.

        Args:
            content: Raw file content.

        Returns:
            Movies in stored order.

        Raises:
            QueueStoreError: If the content is not a list of valid movie records.
        """
        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            raise QueueStoreError(f"Queue file {self._path} is not valid JSON: {e}") from e

        if not isinstance(records, list):
            raise QueueStoreError(f"Queue file {self._path} must contain a JSON array")

        movies = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise QueueStoreError(
                    f"Queue file {self._path} has an invalid entry at position {index}"
                )
            try:
                movies.append(Movie.model_validate(record))
            except ValidationError as e:
                raise QueueStoreError(
                    f"Queue file {self._path} has an invalid entry at position {index}: {e}"
                ) from e
        return movies

    async def _transact(self, mutate: "Mutation[T]") -> T:
        # Shielded so a cancelled caller cannot abandon a half-finished write.
        return await asyncio.shield(self._run_transaction(mutate))

    async def _run_transaction(self, mutate: "Mutation[T]") -> T:
        async with self._lock:
            movies, result = mutate(list(self._movies))
            if movies is not None:
                await self._write_snapshot(movies)
                self._movies = movies
            return result

    async def _write_snapshot(self, movies: List[Movie]) -> None:
        """Persist a queue snapshot, retrying transient failures.

        Args:
            movies: Queue to write.

        Raises:
            QueueStoreError: If every attempt failed.
        """
        payload = json.dumps([movie.to_record() for movie in movies], indent=2)

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._queue_config.flush_retry_attempts),
                wait=wait_exponential(multiplier=self._queue_config.flush_retry_wait),
                retry=retry_if_exception_type(OSError),
                reraise=True,
            ):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        self.logger.warning(
                            f"Retrying queue write (attempt {attempt.retry_state.attempt_number})"
                        )
                    await self._write_atomically(payload)
        except (OSError, RetryError) as e:
            error_msg = f"Failed to write queue file {self._path}: {e}"
            self.logger.error(error_msg)
            raise QueueStoreError(error_msg) from e

        self.logger.debug(f"Wrote {len(movies)} movie(s) to {self._path}")

    async def _write_atomically(self, payload: str) -> None:
        """Write payload to a temporary file and rename it over the queue file."""
        await aiofiles.os.makedirs(self._path.parent, exist_ok=True)
        tmp_path = self._path.with_name(f".{self._path.name}.{uuid.uuid4().hex}.tmp")

        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
                await f.flush()
            await aiofiles.os.replace(tmp_path, self._path)
        except OSError:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
            raise
