from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from muse.model import Genre
from muse.schemas.movie_schema import GenreOut

# Process-wide, read-only once loaded; refreshed only through clear_genres_cache()
_genres_cache: Optional[List[GenreOut]] = None


def list_genres(db: Session) -> List[Genre]:
    return db.query(Genre).order_by(Genre.name).all()


def get_genres(db: Session) -> List[GenreOut]:
    global _genres_cache
    if _genres_cache is None:
        _genres_cache = [GenreOut.model_validate(g) for g in list_genres(db)]
    return list(_genres_cache)


def clear_genres_cache() -> None:
    global _genres_cache
    _genres_cache = None
