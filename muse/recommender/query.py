"""
Candidate predicate builder.

A candidate query is a list of independent clauses joined with AND. Each
clause is plain data (so tests can inspect what a filter set turns into)
and knows how to render itself as a SQLAlchemy condition against ``Movie``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import and_
from sqlalchemy.orm import Query, Session

from muse.model import Genre, Movie
from muse.recommender.config import SelectionConfig
from muse.schemas.movie_schema import PickFilters


@dataclass(frozen=True)
class QualityFloorClause:
    min_runtime: int
    min_vote_count: int
    min_vote_average: float

    def condition(self):
        return and_(
            Movie.adult.is_(False),
            Movie.runtime.isnot(None),
            Movie.runtime >= self.min_runtime,
            Movie.vote_count >= self.min_vote_count,
            Movie.vote_average >= self.min_vote_average,
        )


@dataclass(frozen=True)
class EraClause:
    start: int
    end: Optional[int] = None

    def condition(self):
        if self.end is None:
            return Movie.year >= self.start
        return and_(Movie.year >= self.start, Movie.year <= self.end)


@dataclass(frozen=True)
class RuntimeClause:
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    def condition(self):
        parts = []
        if self.minimum is not None:
            parts.append(Movie.runtime >= self.minimum)
        if self.maximum is not None:
            parts.append(Movie.runtime <= self.maximum)
        return and_(*parts)


@dataclass(frozen=True)
class OriginClause:
    languages: Tuple[str, ...]

    def condition(self):
        return Movie.original_language.in_(self.languages)


@dataclass(frozen=True)
class GenreClause:
    """Matches movies tagged with at least one of the genres."""

    genre_ids: Tuple[int, ...]

    def condition(self):
        return Movie.genres.any(Genre.id.in_(self.genre_ids))


@dataclass(frozen=True)
class ExcludeClause:
    movie_ids: Tuple[int, ...]

    def condition(self):
        return Movie.id.notin_(self.movie_ids)


def quality_floor() -> QualityFloorClause:
    return QualityFloorClause(
        min_runtime=SelectionConfig.MIN_RUNTIME,
        min_vote_count=SelectionConfig.MIN_VOTE_COUNT,
        min_vote_average=SelectionConfig.MIN_VOTE_AVERAGE,
    )


@dataclass
class CandidateQuery:
    clauses: List[object] = field(default_factory=list)
    limit: int = SelectionConfig.CANDIDATE_LIMIT

    @classmethod
    def from_filters(cls, filters: PickFilters, exclude_ids: Iterable[int] = ()) -> "CandidateQuery":
        clauses: List[object] = [quality_floor()]

        if filters.era is not None:
            start, end = SelectionConfig.ERA_RANGES[filters.era.value]
            clauses.append(EraClause(start=start, end=end))

        if filters.min_duration is not None or filters.max_duration is not None:
            clauses.append(RuntimeClause(minimum=filters.min_duration, maximum=filters.max_duration))

        if filters.origin:
            clauses.append(OriginClause(languages=tuple(filters.origin)))

        excluded = tuple(sorted(set(exclude_ids)))
        if excluded:
            clauses.append(ExcludeClause(movie_ids=excluded))

        if filters.genre_ids:
            clauses.append(GenreClause(genre_ids=tuple(filters.genre_ids)))

        return cls(clauses=clauses)

    def clause(self, kind: type):
        for c in self.clauses:
            if isinstance(c, kind):
                return c
        return None

    def to_query(self, db: Session) -> Query:
        return (
            db.query(Movie)
            .filter(*[c.condition() for c in self.clauses])
            .order_by(Movie.id)
            .limit(self.limit)
        )
