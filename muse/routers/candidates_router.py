import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from muse.database import get_db
from muse.recommender.picker import browse_candidates
from muse.schemas.movie_schema import CandidatesRequest, CandidatesResponse
from muse.utils.middleware.logger import session_context

logger = logging.getLogger("muse.routers.candidates")

router = APIRouter(tags=["candidates"])


@router.post("/candidates", response_model=CandidatesResponse)
def list_candidates(payload: CandidatesRequest, db: Session = Depends(get_db)) -> CandidatesResponse:
    """
    Shuffled batch of matching movies for swiping through.
    excludeMovieIds lets the client hide titles it already archived.
    """
    with session_context(payload.session_id):
        try:
            movies = browse_candidates(
                db,
                payload.filters,
                limit=payload.limit,
                session_id=payload.session_id,
                exclude_movie_ids=payload.exclude_movie_ids,
            )
        except Exception as exc:
            logger.exception("Candidates fetch failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch candidates.",
            ) from exc
    return CandidatesResponse(movies=movies)
