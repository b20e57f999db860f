"""Command router implementation."""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import (
    CatalogServiceError,
    CommandRouterError,
    QueueStoreError,
    format_mention,
    mentions_user,
    normalize_quotes,
)
from ..interfaces import ICatalogService, ICommandRouter, IMessenger, IQueueStore
from ..models import CatalogCandidate, IncomingMessage, Intent, IntentKind, Movie
from .intent_classifier import IntentClassifier
from .response_composer import ResponseComposer

# Placeholder posted before the queue listing is filled in with blocks.
LISTING_PLACEHOLDER = "\u2002"

Handler = Callable[[IncomingMessage, Intent], Awaitable[None]]


class CommandRouter(ICommandRouter, LoggerMixin):
    """Routes mentions of the bot to queue and catalog commands.

    Flow per message:
    - Ignore it unless it mentions the bot
    - Normalize quotes and classify it
    - Run the matching command against the queue store and catalog
    - Reply in the message's thread
    """

    def __init__(
        self,
        config: Config,
        classifier: IntentClassifier,
        queue_store: IQueueStore,
        catalog: ICatalogService,
        composer: ResponseComposer,
        messenger: IMessenger,
    ):
        """Initialize command router.

        Args:
            config: Application configuration.
            classifier: Intent classifier.
            queue_store: Movie queue store.
            catalog: Movie catalog service.
            composer: Reply composer.
            messenger: Chat transport replies are sent through.
        """
        self._bot_user_id = config.bot.user_id
        self._classifier = classifier
        self._queue_store = queue_store
        self._catalog = catalog
        self._composer = composer
        self._messenger = messenger
        self._tasks: Set["asyncio.Task[Optional[Intent]]"] = set()
        self._closing = False
        self._handlers: Dict[IntentKind, Handler] = {
            IntentKind.LIST_QUEUE: self._list_queue,
            IntentKind.LOOKUP_MOVIE: self._lookup_movie,
            IntentKind.ADD_MOVIE: self._add_movie,
            IntentKind.REMOVE_MOVIE: self._remove_movie,
        }

    async def handle_message(self, message: IncomingMessage) -> Optional[Intent]:
        """Handle one inbound message.

        Args:
            message: Inbound chat message.

        Returns:
            The intent that was acted on, or None if the message was ignored.
        """
        if not mentions_user(message.text, self._bot_user_id):
            return None

        text = normalize_quotes(message.text)
        self.logger.info(f"Got message from {message.sender_id}: {text}")

        intent = self._classifier.classify(text)
        if intent is None:
            return None

        await self._handlers[intent.kind](message, intent)
        return intent

    def submit(self, message: IncomingMessage) -> "asyncio.Task[Optional[Intent]]":
        """Handle a message as its own task.

        Args:
            message: Inbound chat message.

        Returns:
            The task handling the message.

        Raises:
            CommandRouterError: If the router is shutting down.
        """
        if self._closing:
            raise CommandRouterError("Command router is shutting down")

        task = asyncio.ensure_future(self.handle_message(message))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    async def shutdown(self) -> None:
        """Stop accepting messages and wait for every in-flight one."""
        self._closing = True
        if self._tasks:
            self.logger.info(f"Waiting for {len(self._tasks)} in-flight message(s)")
            await asyncio.wait(set(self._tasks))

    @property
    def pending(self) -> int:
        """Number of messages still being handled."""
        return len(self._tasks)

    def _task_done(self, task: "asyncio.Task[Optional[Intent]]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.logger.error("Unhandled error while handling message", exc_info=error)

    async def _list_queue(self, message: IncomingMessage, intent: Intent) -> None:
        movies = self._queue_store.list_movies()

        if not movies:
            await self._say(message, self._composer.render("queue_empty"))
            return

        if len(movies) == 1:
            summary = self._composer.render("queue_summary_one")
        else:
            summary = self._composer.render("queue_summary_many", str(len(movies)))
        await self._say(message, summary)

        placeholder = await self._messenger.reply(LISTING_PLACEHOLDER)
        await self._messenger.update_message(
            placeholder,
            blocks=self._queue_blocks(movies),
            text=", ".join(movie.title for movie in movies),
        )

    async def _lookup_movie(self, message: IncomingMessage, intent: Intent) -> None:
        query = intent.query or ""
        if not query:
            await self._say(message, self._composer.render("lookup_not_found", query))
            return

        try:
            candidate = await self._catalog.resolve(query)
        except CatalogServiceError:
            await self._say(message, self._composer.render("lookup_failed"))
            return

        if candidate is None:
            await self._say(message, self._composer.render("lookup_not_found", query))
            return

        await self._say(message, self._describe(candidate))

    async def _add_movie(self, message: IncomingMessage, intent: Intent) -> None:
        query = intent.query or ""
        if not query:
            await self._say(message, self._composer.render("add_not_found", query))
            return

        if intent.force:
            movie = Movie(title=query, requestor=message.sender_id)
            if await self._store(message, movie):
                await self._say(message, self._composer.render("force_added", query))
            return

        try:
            candidate = await self._catalog.resolve(query)
        except CatalogServiceError:
            await self._say(message, self._composer.render("lookup_failed"))
            return

        if candidate is None:
            await self._say(message, self._composer.render("add_not_found", query))
            return

        await self._say(message, self._describe(candidate))
        movie = Movie(title=candidate.title, requestor=message.sender_id)
        if await self._store(message, movie):
            await self._say(message, self._composer.render("added_to_queue"))

    async def _remove_movie(self, message: IncomingMessage, intent: Intent) -> None:
        query = intent.query or ""
        try:
            removed = await self._queue_store.remove(query)
        except QueueStoreError:
            await self._say(message, self._composer.render("queue_write_failed"))
            return

        if removed is None:
            await self._say(message, self._composer.render("remove_not_found", query))
        else:
            await self._say(message, self._composer.render("removed", removed.title))

    async def _store(self, message: IncomingMessage, movie: Movie) -> bool:
        """Add a movie to the queue, telling the user if it could not be saved."""
        try:
            await self._queue_store.add(movie)
        except QueueStoreError:
            await self._say(message, self._composer.render("queue_write_failed"))
            return False
        return True

    def _describe(self, candidate: CatalogCandidate) -> str:
        return self._composer.render(
            "found_movie",
            candidate.release_year or "unknown",
            f"_{candidate.title}_",
            f"```{candidate.overview}```",
        )

    def _queue_blocks(self, movies: List[Movie]) -> List[Dict[str, Any]]:
        return [
            {
                "type": "section",
                "fields": [
                    {
                        "type": "mrkdwn",
                        "text": self._composer.render(
                            "queue_item", movie.title, format_mention(movie.requestor)
                        ),
                    }
                ],
            }
            for movie in movies
        ]

    async def _say(self, message: IncomingMessage, text: str) -> None:
        await self._messenger.reply(text, thread_ts=message.ts)
