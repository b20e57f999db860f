"""Catalog (TMDb) search result models."""

from typing import Optional

from pydantic import BaseModel, Field


class CatalogCandidate(BaseModel):
    """A movie returned by a catalog search."""

    title: str = Field(..., description="Movie title")
    release_date: Optional[str] = Field(None, description="Release date as given by the catalog")
    overview: str = Field(default="", description="Movie overview/plot")
    vote_count: int = Field(default=0, description="Number of votes, used to rank candidates")
    popularity: Optional[float] = Field(None, description="TMDb popularity score")
    tmdb_id: Optional[int] = Field(None, description="TMDb ID")

    @property
    def release_year(self) -> Optional[str]:
        """Leading year component of the release date."""
        if not self.release_date:
            return None
        return self.release_date.split("-")[0] or None
