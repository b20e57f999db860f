"""Queue entry data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MovieNight(BaseModel):
    """A scheduled screening of a queued movie."""

    host: str = Field(..., description="User id of the host")
    date: datetime = Field(..., description="When the movie night takes place")

    model_config = ConfigDict(frozen=True)


class Movie(BaseModel):
    """A requested movie waiting in the queue."""

    title: str = Field(..., min_length=1, description="Movie title")
    requestor: str = Field(..., description="User id of whoever requested it")
    planned_movie_night: Optional[MovieNight] = Field(
        None, alias="plannedMovieNight", description="Planned movie night, if scheduled"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_record(self) -> dict:
        """Serialize to the on-disk JSON record."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
