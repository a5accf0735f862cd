import logging

from langchain_core.runnables import RunnableConfig

from muse.crud import pick_crud
from muse.recommender.errors import SelectionInvariantError
from muse.recommender.selection import apply_first_pick_bias, default_rng, weighted_random_select
from muse.recommender.state import PickState

logger = logging.getLogger("muse.recommender.selection")


def first_pick_bias(state: PickState, config: RunnableConfig):
    db = config["configurable"]["db"]
    is_first_pick = pick_crud.is_first_pick_for_session(db, state["session_id"])
    weighted = apply_first_pick_bias(state["weighted"], is_first_pick)
    if is_first_pick:
        logger.debug("session %s: first pick, pool narrowed to %d", state["session_id"], len(weighted))
    return {"is_first_pick": is_first_pick, "weighted": weighted}


def sample(state: PickState, config: RunnableConfig):
    rng = config["configurable"].get("rng") or default_rng()
    pool = state["weighted"]
    selected = weighted_random_select([(c, c.weight) for c in pool], rng=rng)
    if selected is None:
        raise SelectionInvariantError(f"sampler returned nothing from {len(pool)} candidates")
    return {"selected": selected}
