from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from muse.recommender.config import SelectionConfig

from . import ORMModel, Era, HealthStatus


class PickFilters(ORMModel):
    genre_ids: Optional[list[int]] = Field(None, alias="genreIds", description="TMDB genre ids, any-of")
    era: Optional[Era] = None
    origin: Optional[list[str]] = Field(None, description="Original-language codes, e.g. en, ko")
    min_duration: Optional[int] = Field(None, alias="minDuration", ge=60, description="Minutes")
    max_duration: Optional[int] = Field(None, alias="maxDuration", ge=60, description="Minutes")

    @field_validator("origin")
    @classmethod
    def lower_origin(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return value
        return [code.strip().lower() for code in value if code and code.strip()]

    def snapshot(self) -> dict:
        """Wire-shaped copy stored alongside a pick."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MovieOut(ORMModel):
    id: int
    title: str
    year: Optional[int] = None
    runtime: int = 0
    synopsis: str = ""
    poster_url: str = Field("", alias="posterUrl")
    vote_average: float = Field(0.0, alias="voteAverage")
    genres: list[str] = Field(default_factory=list)


class PickRequest(ORMModel):
    session_id: str = Field(..., alias="sessionId", min_length=1, max_length=255)
    filters: PickFilters = Field(default_factory=PickFilters)


class PickResponse(ORMModel):
    movie: Optional[MovieOut] = None
    message: Optional[str] = None


class CandidatesRequest(ORMModel):
    filters: PickFilters = Field(default_factory=PickFilters)
    limit: int = Field(SelectionConfig.DEFAULT_BROWSE_LIMIT, ge=1, le=SelectionConfig.MAX_BROWSE_LIMIT)
    session_id: Optional[str] = Field(None, alias="sessionId", min_length=1, max_length=255)
    exclude_movie_ids: Optional[list[int]] = Field(None, alias="excludeMovieIds")


class CandidatesResponse(ORMModel):
    movies: list[MovieOut]


class SearchResponse(ORMModel):
    movie: Optional[MovieOut] = None


class GenreOut(ORMModel):
    id: int
    name: str


class GenresResponse(ORMModel):
    genres: list[GenreOut]


class HealthResponse(ORMModel):
    status: HealthStatus
    timestamp: datetime
