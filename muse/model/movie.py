from sqlalchemy import (
    Column,
    Integer,
    SmallInteger,
    String,
    Text,
    Numeric,
    Boolean,
    DateTime,
    ForeignKey,
    Table,
    func,
)
from sqlalchemy.orm import relationship

from muse.database import Base

movie_genres = Table(
    "movie_genres",
    Base.metadata,
    Column("movie_id", Integer, ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Movie(Base):
    __tablename__ = "movies"
    id = Column(Integer, primary_key=True, index=True)
    tmdb_id = Column(Integer, nullable=False, unique=True, index=True)
    title = Column(String(500), nullable=False)
    original_title = Column(String(500), nullable=True)
    year = Column(SmallInteger, nullable=True, index=True)
    runtime = Column(SmallInteger, nullable=True, index=True)  # in minutes
    synopsis = Column(Text, nullable=True)
    poster_path = Column(String(255), nullable=True)
    vote_average = Column(Numeric(3, 1, asdecimal=False), default=0, index=True)  # 0-10
    vote_count = Column(Integer, default=0, index=True)
    original_language = Column(String(10), nullable=True, index=True)
    adult = Column(Boolean, default=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    genres = relationship("Genre", secondary=movie_genres, back_populates="movies")
    picks = relationship("UserPick", back_populates="movie", cascade="all,delete-orphan")
