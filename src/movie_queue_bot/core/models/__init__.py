"""Core data models."""

from .catalog import CatalogCandidate
from .intent import Intent, IntentKind
from .message import IncomingMessage, MessageRef
from .movie import Movie, MovieNight

__all__ = [
    "Movie",
    "MovieNight",
    "CatalogCandidate",
    "Intent",
    "IntentKind",
    "IncomingMessage",
    "MessageRef",
]
