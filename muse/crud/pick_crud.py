from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from muse.model import UserPick
from muse.recommender.config import SelectionConfig


def get_recent_pick_movie_ids(db: Session, session_id: str, limit: Optional[int] = None) -> List[int]:
    """Movie ids shown to the session, most recent first."""
    limit = SelectionConfig.RECENT_PICKS_LIMIT if limit is None else limit
    rows = (
        db.query(UserPick.movie_id)
        .filter(UserPick.session_id == session_id)
        .order_by(UserPick.created_at.desc(), UserPick.id.desc())
        .limit(limit)
        .all()
    )
    return [movie_id for (movie_id,) in rows]


def is_first_pick_for_session(db: Session, session_id: str) -> bool:
    return db.query(UserPick.id).filter(UserPick.session_id == session_id).first() is None


def record_pick(db: Session, *, session_id: str, movie_id: int, filters: dict) -> UserPick:
    pick = UserPick(session_id=session_id, movie_id=movie_id, filters=filters)
    db.add(pick)
    db.commit()
    db.refresh(pick)
    return pick


def count_picks(db: Session, session_id: Optional[str] = None) -> int:
    query = db.query(UserPick)
    if session_id is not None:
        query = query.filter(UserPick.session_id == session_id)
    return query.count()
