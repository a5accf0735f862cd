from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from muse.database import Base

# TMDB genre ids; the catalog is loaded once and never written at runtime
TMDB_GENRES = [
    (28, "Action"),
    (12, "Adventure"),
    (16, "Animation"),
    (35, "Comedy"),
    (80, "Crime"),
    (99, "Documentary"),
    (18, "Drama"),
    (10751, "Family"),
    (14, "Fantasy"),
    (36, "History"),
    (27, "Horror"),
    (10402, "Music"),
    (9648, "Mystery"),
    (10749, "Romance"),
    (878, "Science Fiction"),
    (10770, "TV Movie"),
    (53, "Thriller"),
    (10752, "War"),
    (37, "Western"),
]


class Genre(Base):
    __tablename__ = "genres"
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(100), nullable=False)

    movies = relationship("Movie", secondary="movie_genres", back_populates="genres")
