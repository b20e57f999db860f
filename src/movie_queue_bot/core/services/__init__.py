"""Core service implementations."""

from .command_router import CommandRouter
from .console_messenger import ConsoleMessenger
from .intent_classifier import IntentClassifier, IntentRecognizer
from .queue_store import JsonQueueStore
from .response_composer import ResponseComposer
from .tmdb_service import TMDbService

__all__ = [
    "IntentClassifier",
    "IntentRecognizer",
    "JsonQueueStore",
    "TMDbService",
    "ResponseComposer",
    "ConsoleMessenger",
    "CommandRouter",
]
