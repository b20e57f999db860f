"""Pytest configuration and fixtures."""

import random
from typing import Any, Dict, List, Optional

import pytest

from movie_queue_bot.config import ConfigManager
from movie_queue_bot.core.interfaces import ICatalogService, IMessenger
from movie_queue_bot.core.models import CatalogCandidate, IncomingMessage, MessageRef
from movie_queue_bot.core.services import (
    CommandRouter,
    IntentClassifier,
    JsonQueueStore,
    ResponseComposer,
)
from movie_queue_bot.infrastructure import Container
from movie_queue_bot.utils import CatalogServiceError

BOT_USER_ID = "U057975N5V5"


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file."""
    queue_path = tmp_path / "data" / "queue.json"
    config_content = f"""
bot:
  user_id: "{BOT_USER_ID}"
  token: "xoxb-test"
  signing_secret: "test-secret"

tmdb:
  api_token: "test-tmdb-token"
  timeout: 2

queue:
  path: "{queue_path}"
  flush_retry_attempts: 2
  flush_retry_wait: 0
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def config_manager(temp_config_file):
    """Create a configuration manager with test config."""
    return ConfigManager(temp_config_file, load_env_file=False)


@pytest.fixture
def config(config_manager):
    """Load test configuration."""
    return config_manager.load_config()


@pytest.fixture
def container(config_manager):
    """Create a test container."""
    return Container(config_manager)


class FakeCatalog(ICatalogService):
    """In-memory catalog recording every lookup."""

    def __init__(self) -> None:
        self.movies: Dict[str, List[CatalogCandidate]] = {}
        self.queries: List[str] = []
        self.error: Optional[Exception] = None

    def add_result(self, query: str, *candidates: CatalogCandidate) -> None:
        self.movies[query.lower()] = list(candidates)

    async def search(self, title: str) -> List[CatalogCandidate]:
        self.queries.append(title)
        if self.error is not None:
            raise self.error
        return list(self.movies.get(title.lower(), []))

    async def resolve(self, query: str) -> Optional[CatalogCandidate]:
        candidates = sorted(await self.search(query), key=lambda c: c.vote_count, reverse=True)
        return candidates[0] if candidates else None

    def fail_with(self, message: str = "boom") -> None:
        self.error = CatalogServiceError(message)


class RecordingMessenger(IMessenger):
    """Messenger that keeps every message it was asked to send."""

    def __init__(self) -> None:
        self.replies: List[Dict[str, Any]] = []
        self.updates: List[Dict[str, Any]] = []
        self._ts = 0

    async def reply(
        self,
        text: str,
        thread_ts: Optional[str] = None,
        blocks: Optional[List[Dict[str, Any]]] = None,
    ) -> MessageRef:
        self._ts += 1
        ref = MessageRef(channel="C1", ts=f"2000.{self._ts}")
        self.replies.append({"text": text, "thread_ts": thread_ts, "blocks": blocks, "ref": ref})
        return ref

    async def update_message(
        self, ref: MessageRef, blocks: List[Dict[str, Any]], text: str
    ) -> None:
        self.updates.append({"ref": ref, "blocks": blocks, "text": text})

    @property
    def texts(self) -> List[str]:
        return [reply["text"] for reply in self.replies]


@pytest.fixture
def fake_catalog():
    """Fake catalog service."""
    return FakeCatalog()


@pytest.fixture
def messenger():
    """Recording messenger."""
    return RecordingMessenger()


@pytest.fixture
def queue_store(config):
    """Queue store writing to a temporary directory."""
    return JsonQueueStore(config)


@pytest.fixture
def composer(config):
    """Response composer with a seeded random source."""
    return ResponseComposer(config, rng=random.Random(1234))


@pytest.fixture
def router(config, queue_store, fake_catalog, composer, messenger):
    """Command router wired to fakes."""
    return CommandRouter(
        config=config,
        classifier=IntentClassifier(),
        queue_store=queue_store,
        catalog=fake_catalog,
        composer=composer,
        messenger=messenger,
    )


@pytest.fixture
def make_message():
    """Build inbound messages that mention the bot."""
    counter = {"ts": 0}

    def _make(text: str, sender_id: str = "U_ALICE", mention: bool = True) -> IncomingMessage:
        counter["ts"] += 1
        if mention:
            text = f"<@{BOT_USER_ID}> {text}"
        return IncomingMessage(
            text=text, sender_id=sender_id, ts=f"1000.{counter['ts']}", channel="C1"
        )

    return _make
