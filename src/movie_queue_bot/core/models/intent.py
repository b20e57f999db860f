"""Intent data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class IntentKind(str, Enum):
    """Kinds of request the bot understands."""

    LIST_QUEUE = "list_queue"
    LOOKUP_MOVIE = "lookup_movie"
    ADD_MOVIE = "add_movie"
    REMOVE_MOVIE = "remove_movie"


class Intent(BaseModel):
    """A classified message."""

    kind: IntentKind = Field(..., description="Which request this message makes")
    query: Optional[str] = Field(None, description="Extracted movie title, if any")
    force: bool = Field(default=False, description="Skip catalog resolution when adding")
    text: str = Field(..., description="Normalized message text")
