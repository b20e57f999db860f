"""Test the command router."""

import asyncio
import json

import pytest

from movie_queue_bot.core.models import CatalogCandidate, IntentKind, Movie
from movie_queue_bot.utils import CommandRouterError, QueueStoreError

INCEPTION = CatalogCandidate(
    title="Inception",
    release_date="2010-07-16",
    overview="A thief who steals corporate secrets through dream-sharing technology.",
    vote_count=100,
)


@pytest.mark.asyncio
async def test_ignores_messages_without_mention(router, messenger, make_message):
    """Test that only mentions of the bot are handled."""
    result = await router.handle_message(make_message('add "Inception"', mention=False))

    assert result is None
    assert messenger.replies == []


@pytest.mark.asyncio
async def test_ignores_unrecognized_messages(router, messenger, make_message):
    """Test that unmatched text gets no reply."""
    result = await router.handle_message(make_message("good morning!"))

    assert result is None
    assert messenger.replies == []


@pytest.mark.asyncio
async def test_add_found_movie(router, queue_store, fake_catalog, messenger, make_message):
    """Test adding a movie the catalog knows."""
    fake_catalog.add_result("Inception", INCEPTION)
    message = make_message('add "Inception"')

    intent = await router.handle_message(message)

    assert intent.kind == IntentKind.ADD_MOVIE
    assert queue_store.list_movies() == [Movie(title="Inception", requestor="U_ALICE")]
    assert len(messenger.replies) == 2
    described, confirmed = messenger.texts
    assert "2010" in described
    assert "Inception" in described
    assert INCEPTION.overview in described
    assert confirmed == "...added it to the queue!"
    assert all(reply["thread_ts"] == message.ts for reply in messenger.replies)
    assert json.loads(queue_store.path.read_text()) == [
        {"title": "Inception", "requestor": "U_ALICE"}
    ]


@pytest.mark.asyncio
async def test_add_uses_catalog_title(router, queue_store, fake_catalog, make_message):
    """Test that the stored title is the catalog's, not the query."""
    fake_catalog.add_result("inception", INCEPTION)

    await router.handle_message(make_message("add inception"))

    assert [m.title for m in queue_store.list_movies()] == ["Inception"]


@pytest.mark.asyncio
async def test_add_not_found(router, queue_store, fake_catalog, messenger, make_message):
    """Test adding a movie the catalog does not know."""
    await router.handle_message(make_message('add "Inceptoin"'))

    assert queue_store.list_movies() == []
    assert len(messenger.texts) == 1
    assert "Inceptoin" in messenger.texts[0]
    assert "force add" in messenger.texts[0]


@pytest.mark.asyncio
async def test_force_add_skips_catalog(router, queue_store, fake_catalog, messenger, make_message):
    """Test that force add stores the literal text without a lookup."""
    fake_catalog.add_result("inception", INCEPTION)

    await router.handle_message(make_message('force add "inception (director\'s cut)"'))

    assert fake_catalog.queries == []
    assert queue_store.list_movies() == [
        Movie(title="inception (director's cut)", requestor="U_ALICE")
    ]
    assert messenger.texts == [
        "Not sure if I've heard of it, but added 'inception (director's cut)' to the queue!"
    ]


@pytest.mark.asyncio
async def test_add_catalog_failure(router, queue_store, fake_catalog, messenger, make_message):
    """Test that a catalog failure is reported and changes nothing."""
    fake_catalog.fail_with("connection reset")

    await router.handle_message(make_message('add "Inception"'))

    assert queue_store.list_movies() == []
    assert messenger.texts == [router._composer.render("lookup_failed")]


@pytest.mark.asyncio
async def test_add_write_failure_is_reported(
    router, queue_store, fake_catalog, messenger, make_message, monkeypatch
):
    """Test that a failed queue write is surfaced to the user."""
    fake_catalog.add_result("Inception", INCEPTION)

    async def failing_add(movie):
        raise QueueStoreError("disk full")

    monkeypatch.setattr(queue_store, "add", failing_add)

    await router.handle_message(make_message('add "Inception"'))

    assert len(messenger.texts) == 2
    assert messenger.texts[1] == router._composer.render("queue_write_failed")


@pytest.mark.asyncio
async def test_lookup_found(router, queue_store, fake_catalog, messenger, make_message):
    """Test that lookup describes the movie without touching the queue."""
    fake_catalog.add_result("inception", INCEPTION)

    intent = await router.handle_message(make_message("what is inception?"))

    assert intent.kind == IntentKind.LOOKUP_MOVIE
    assert fake_catalog.queries == ["inception"]
    assert len(messenger.texts) == 1
    assert "_Inception_" in messenger.texts[0]
    assert "2010" in messenger.texts[0]
    assert queue_store.list_movies() == []


@pytest.mark.asyncio
async def test_lookup_not_found_differs_from_add_not_found(
    router, fake_catalog, messenger, make_message
):
    """Test that lookup and add not-found replies are distinct and deterministic."""
    await router.handle_message(make_message('what is "Inceptoin"'))
    await router.handle_message(make_message('what is "Inceptoin"'))
    await router.handle_message(make_message('add "Inceptoin"'))

    lookup_first, lookup_second, add = messenger.texts
    assert lookup_first == lookup_second
    assert lookup_first == (
        "Try as I might, I couldn't find 'Inceptoin.' Are you sure you spelled it right?"
    )
    assert lookup_first != add


@pytest.mark.asyncio
async def test_lookup_catalog_failure(router, fake_catalog, messenger, make_message):
    """Test that a catalog failure is not reported as not found."""
    fake_catalog.fail_with()

    await router.handle_message(make_message('look up "Inception"'))

    assert messenger.texts == [router._composer.render("lookup_failed")]
    assert "couldn't find" not in messenger.texts[0]


@pytest.mark.asyncio
async def test_remove_found(router, queue_store, messenger, make_message):
    """Test removing a queued movie by title fragment."""
    for title in ["Alien", "Inception", "Heat"]:
        await queue_store.add(Movie(title=title, requestor="U_BOB"))

    await router.handle_message(make_message('remove "inception"'))

    assert [m.title for m in queue_store.list_movies()] == ["Alien", "Heat"]
    assert messenger.texts == [
        "I really wish you all would take the time to see it, but I removed _Inception_ "
        "from the movie queue."
    ]


@pytest.mark.asyncio
async def test_remove_not_found(router, queue_store, messenger, make_message):
    """Test removing a title that is not queued."""
    await queue_store.add(Movie(title="Heat", requestor="U_BOB"))

    await router.handle_message(make_message("remove alien"))

    assert len(queue_store.list_movies()) == 1
    assert messenger.texts == [
        "There isn't a movie called 'alien' in the queue. Did you spell it right?"
    ]


@pytest.mark.asyncio
async def test_list_empty_queue(router, messenger, make_message):
    """Test listing an empty queue."""
    intent = await router.handle_message(make_message("movie queue"))

    assert intent.kind == IntentKind.LIST_QUEUE
    assert messenger.texts == ["The queue is currently empty, but feel free to add to it!"]
    assert messenger.updates == []


@pytest.mark.asyncio
async def test_list_single_movie(router, queue_store, messenger, make_message):
    """Test the singular summary."""
    await queue_store.add(Movie(title="Heat", requestor="U_BOB"))

    await router.handle_message(make_message("movie queue"))

    assert messenger.texts[0] == "Sure thing! There is currently 1 movie in the queue:"


@pytest.mark.asyncio
async def test_list_queue_blocks(router, queue_store, messenger, make_message):
    """Test the summary and per-movie block listing."""
    await queue_store.add(Movie(title="Alien", requestor="U_BOB"))
    await queue_store.add(Movie(title="Heat", requestor="U_CAROL"))
    message = make_message("what's on the film list?")

    await router.handle_message(message)

    summary, placeholder = messenger.replies
    assert summary["text"] == "Sure thing! There are currently 2 movies in the queue:"
    assert summary["thread_ts"] == message.ts
    assert len(messenger.updates) == 1
    update = messenger.updates[0]
    assert update["ref"] == placeholder["ref"]
    assert update["text"] == "Alien, Heat"
    assert update["blocks"] == [
        {
            "type": "section",
            "fields": [{"type": "mrkdwn", "text": "_Alien_ requested by <@U_BOB>"}],
        },
        {
            "type": "section",
            "fields": [{"type": "mrkdwn", "text": "_Heat_ requested by <@U_CAROL>"}],
        },
    ]


@pytest.mark.asyncio
async def test_submit_and_shutdown_wait_for_tasks(router, queue_store, fake_catalog, make_message):
    """Test that concurrently submitted adds are all persisted by shutdown."""
    fake_catalog.add_result("Alien", CatalogCandidate(title="Alien", vote_count=5))
    fake_catalog.add_result("Heat", CatalogCandidate(title="Heat", vote_count=5))

    tasks = [
        router.submit(make_message('add "Alien"')),
        router.submit(make_message('add "Heat"')),
        router.submit(make_message('force add "Home Video"')),
    ]
    await router.shutdown()

    assert all(task.done() for task in tasks)
    assert router.pending == 0
    assert sorted(m.title for m in queue_store.list_movies()) == ["Alien", "Heat", "Home Video"]
    assert len(json.loads(queue_store.path.read_text())) == 3


@pytest.mark.asyncio
async def test_submit_after_shutdown_raises(router, make_message):
    """Test that a closed router refuses new messages."""
    await router.shutdown()

    with pytest.raises(CommandRouterError):
        router.submit(make_message("movie queue"))


@pytest.mark.asyncio
async def test_submitted_task_errors_are_logged(router, make_message, monkeypatch, caplog):
    """Test that an unexpected error in a message task is logged."""

    async def exploding(message):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(router, "handle_message", exploding)

    task = router.submit(make_message("movie queue"))
    with pytest.raises(RuntimeError):
        await task
    await asyncio.sleep(0)

    assert "Unhandled error while handling message" in caplog.text


@pytest.mark.asyncio
async def test_add_title_containing_force_uses_catalog(
    router, queue_store, fake_catalog, make_message
):
    """Test that "force" inside a title does not skip the catalog."""
    fake_catalog.add_result(
        "the force awakens",
        CatalogCandidate(
            title="Star Wars: The Force Awakens", release_date="2015-12-15", vote_count=19000
        ),
    )

    await router.handle_message(make_message("add the force awakens"))

    assert fake_catalog.queries == ["the force awakens"]
    assert [m.title for m in queue_store.list_movies()] == ["Star Wars: The Force Awakens"]
