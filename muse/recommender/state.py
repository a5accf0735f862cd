from typing import Any, List, Optional, TypedDict

from muse.recommender.selection import WeightedCandidate
from muse.schemas.movie_schema import MovieOut, PickFilters


class PickState(TypedDict, total=False):
    session_id: str
    filters: PickFilters
    exclude_ids: List[int]
    candidates: List[Any]
    weighted: List[WeightedCandidate]
    is_first_pick: bool
    selected: Optional[WeightedCandidate]
    movie: Optional[MovieOut]
