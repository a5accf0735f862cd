"""Public entry points: pick one movie for a session, or browse a shuffled batch."""
from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from muse.crud import movie_crud, pick_crud
from muse.recommender.config import SelectionConfig
from muse.recommender.graph import pick_graph
from muse.recommender.selection import default_rng
from muse.schemas.movie_schema import MovieOut, PickFilters

logger = logging.getLogger("muse.recommender")

NO_MATCH_MESSAGE = "No movies match your criteria. Try broader filters."


def pick_movie(
    db: Session,
    session_id: str,
    filters: Optional[PickFilters] = None,
    rng: Optional[random.Random] = None,
) -> Optional[MovieOut]:
    """
    Choose one movie for ``session_id`` and record it.

    Returns None when nothing matches the filters; in that case no pick is
    recorded. Store errors propagate unchanged.
    """
    result = pick_graph.invoke(
        {"session_id": session_id, "filters": filters or PickFilters()},
        config={"configurable": {"db": db, "rng": rng}},
    )
    movie = result.get("movie")
    if movie is None:
        logger.info("session %s: no candidates matched", session_id)
    return movie


def browse_candidates(
    db: Session,
    filters: Optional[PickFilters] = None,
    limit: int = SelectionConfig.DEFAULT_BROWSE_LIMIT,
    session_id: Optional[str] = None,
    exclude_movie_ids: Optional[Iterable[int]] = None,
    rng: Optional[random.Random] = None,
) -> List[MovieOut]:
    """Uniformly shuffled batch of matching movies. Nothing is recorded."""
    recent = pick_crud.get_recent_pick_movie_ids(db, session_id) if session_id else []
    exclude_ids = set(recent) | set(exclude_movie_ids or [])

    candidates = movie_crud.get_candidate_movies(db, filters or PickFilters(), exclude_ids)
    if not candidates:
        return []

    (rng or default_rng()).shuffle(candidates)
    selected = candidates[:min(limit, len(candidates))]

    genres = movie_crud.get_movies_genres(db, [m.id for m in selected])
    return [movie_crud.to_movie_out(m, genres.get(m.id, [])) for m in selected]
