from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from muse.model import Genre, Movie, movie_genres
from muse.recommender.query import CandidateQuery
from muse.schemas.movie_schema import MovieOut, PickFilters
from muse.utils.config import settings


def get_candidate_movies(db: Session, filters: PickFilters, exclude_ids: Iterable[int] = ()) -> List[Movie]:
    """Movies passing the quality floors and every requested filter, minus ``exclude_ids``."""
    return CandidateQuery.from_filters(filters, exclude_ids).to_query(db).all()


def get_movies_genres(db: Session, movie_ids: Iterable[int]) -> Dict[int, List[str]]:
    """Genre names for a batch of movies in a single query."""
    movie_ids = list(movie_ids)
    if not movie_ids:
        return {}

    rows = (
        db.query(movie_genres.c.movie_id, Genre.name)
        .join(Genre, Genre.id == movie_genres.c.genre_id)
        .filter(movie_genres.c.movie_id.in_(movie_ids))
        .order_by(movie_genres.c.movie_id, Genre.name)
        .all()
    )
    genres: Dict[int, List[str]] = defaultdict(list)
    for movie_id, name in rows:
        genres[movie_id].append(name)
    return dict(genres)


def get_movie_genres(db: Session, movie_id: int) -> List[str]:
    return get_movies_genres(db, [movie_id]).get(movie_id, [])


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_by_title(db: Session, title: str) -> Optional[Movie]:
    """Best title match: exact (case-insensitive) first, then most voted partial match."""
    pattern = f"%{_escape_like(title)}%"
    exact_first = case((func.lower(Movie.title) == title.lower(), 0), else_=1)
    return (
        db.query(Movie)
        .filter(Movie.title.ilike(pattern, escape="\\"))
        .order_by(exact_first, Movie.vote_count.desc(), Movie.id)
        .first()
    )


def poster_url(poster_path: Optional[str]) -> str:
    if not poster_path:
        return ""
    return f"{settings.TMDB_IMAGE_BASE_URL}{poster_path}"


def to_movie_out(movie: Movie, genres: List[str]) -> MovieOut:
    return MovieOut(
        id=movie.id,
        title=movie.title,
        year=movie.year,
        runtime=movie.runtime or 0,
        synopsis=movie.synopsis or "",
        poster_url=poster_url(movie.poster_path),
        vote_average=round(float(movie.vote_average or 0), 1),
        genres=genres,
    )
