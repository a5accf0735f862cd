import logging

from langchain_core.runnables import RunnableConfig

from muse.crud import pick_crud
from muse.crud.movie_crud import to_movie_out
from muse.recommender.state import PickState

logger = logging.getLogger("muse.recommender.history")


def fetch_exclusions(state: PickState, config: RunnableConfig):
    db = config["configurable"]["db"]
    recent = pick_crud.get_recent_pick_movie_ids(db, state["session_id"])
    logger.debug("session %s: excluding %d recent picks", state["session_id"], len(recent))
    return {"exclude_ids": recent}


def record_pick(state: PickState, config: RunnableConfig):
    db = config["configurable"]["db"]
    selected = state["selected"]

    # the pick is only returned once it is durable
    pick_crud.record_pick(
        db,
        session_id=state["session_id"],
        movie_id=selected.movie.id,
        filters=state["filters"].snapshot(),
    )
    logger.info("session %s: picked movie %s", state["session_id"], selected.movie.id)
    return {"movie": to_movie_out(selected.movie, selected.genres)}
