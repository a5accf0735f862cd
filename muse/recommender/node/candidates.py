import logging
import math

from langchain_core.runnables import RunnableConfig

from muse.crud import movie_crud
from muse.recommender.errors import SelectionInvariantError
from muse.recommender.selection import WeightedCandidate, calculate_weight
from muse.recommender.state import PickState

logger = logging.getLogger("muse.recommender.candidates")


def fetch_candidates(state: PickState, config: RunnableConfig):
    db = config["configurable"]["db"]
    candidates = movie_crud.get_candidate_movies(db, state["filters"], state.get("exclude_ids") or [])
    logger.debug("session %s: %d candidates", state["session_id"], len(candidates))
    return {"candidates": candidates}


def route_candidates(state: PickState) -> str:
    return "weigh" if state.get("candidates") else "empty"


def weigh_candidates(state: PickState, config: RunnableConfig):
    db = config["configurable"]["db"]
    candidates = state["candidates"]
    genres = movie_crud.get_movies_genres(db, [m.id for m in candidates])

    weighted = []
    for movie in candidates:
        weight = calculate_weight(movie)
        if weight < 0 or not math.isfinite(weight):
            raise SelectionInvariantError(f"movie {movie.id} produced weight {weight!r}")
        weighted.append(WeightedCandidate(movie=movie, weight=weight, genres=genres.get(movie.id, [])))
    return {"weighted": weighted}
