import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from muse.database import get_db
from muse.recommender.picker import NO_MATCH_MESSAGE, pick_movie
from muse.schemas.movie_schema import PickRequest, PickResponse
from muse.utils.middleware.logger import session_context

logger = logging.getLogger("muse.routers.pick")

router = APIRouter(tags=["pick"])


@router.post("/pick", response_model=PickResponse, response_model_exclude_unset=True)
def pick(payload: PickRequest, db: Session = Depends(get_db)) -> PickResponse:
    """Recommend one movie for the session and remember it."""
    with session_context(payload.session_id):
        try:
            movie = pick_movie(db, payload.session_id, payload.filters)
        except Exception as exc:
            logger.exception("Pick failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to pick a movie. Please try again.",
            ) from exc

    if movie is None:
        return PickResponse(movie=None, message=NO_MATCH_MESSAGE)
    return PickResponse(movie=movie)
