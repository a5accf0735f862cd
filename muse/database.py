from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from muse.utils.config import settings

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Create missing tables and make sure the genre lookup is populated."""
    from muse.model import Genre
    from muse.model.genre import TMDB_GENRES

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    db = sessionmaker(autocommit=False, autoflush=False, bind=bind)()
    try:
        existing = {genre_id for (genre_id,) in db.query(Genre.id).all()}
        for genre_id, name in TMDB_GENRES:
            if genre_id not in existing:
                db.add(Genre(id=genre_id, name=name))
        db.commit()
    finally:
        db.close()
