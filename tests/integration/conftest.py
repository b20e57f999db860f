"""Integration test fixtures and configuration."""

import logging

import pytest

from movie_queue_bot.core.interfaces import ICatalogService
from movie_queue_bot.infrastructure import Container

from ..conftest import FakeCatalog, RecordingMessenger


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo the CLI's logging setup after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def integration_catalog():
    """Catalog shared by every container built in one test."""
    return FakeCatalog()


@pytest.fixture
def build_container(config_manager, integration_catalog):
    """Build fully wired containers, as a fresh process would."""

    def _build():
        messenger = RecordingMessenger()
        container = Container(config_manager)
        container.configure_default_services(messenger)
        container.register_instance(ICatalogService, integration_catalog)  # type: ignore
        return container, messenger

    return _build
