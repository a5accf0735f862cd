import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from muse.crud import movie_crud
from muse.database import get_db
from muse.schemas.movie_schema import SearchResponse

logger = logging.getLogger("muse.routers.movies")

router = APIRouter(prefix="/movies", tags=["movies"])


@router.get("/search", response_model=SearchResponse)
def search_movie(
    title: str = Query(..., description="Title (or part of it) to look up"),
    db: Session = Depends(get_db),
) -> SearchResponse:
    """Best catalog match for a title, quality floors not applied."""
    title = title.strip()
    if not title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="title query parameter is required")

    try:
        movie = movie_crud.search_by_title(db, title)
        if movie is None:
            return SearchResponse(movie=None)
        genres = movie_crud.get_movie_genres(db, movie.id)
    except Exception as exc:
        logger.exception("Movie search failed for %r", title)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search for movie.",
        ) from exc

    return SearchResponse(movie=movie_crud.to_movie_out(movie, genres))
