import itertools
import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from muse.crud import genre_crud
from muse.database import get_db, init_db
from muse.main import app
from muse.model import Genre, Movie


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _fresh_genre_cache():
    genre_crud.clear_genres_cache()
    yield
    genre_crud.clear_genres_cache()


@pytest.fixture
def make_movie(db):
    """Insert a movie that passes every quality floor unless told otherwise."""
    counter = itertools.count(1)

    def _make(
        title=None,
        year=2015,
        runtime=110,
        vote_average=7.0,
        vote_count=1000,
        language="en",
        adult=False,
        genre_ids=(),
        poster_path="/poster.jpg",
        synopsis="A film.",
    ):
        n = next(counter)
        movie = Movie(
            tmdb_id=100000 + n,
            title=title or f"Movie {n}",
            original_title=title or f"Movie {n}",
            year=year,
            runtime=runtime,
            synopsis=synopsis,
            poster_path=poster_path,
            vote_average=vote_average,
            vote_count=vote_count,
            original_language=language,
            adult=adult,
        )
        for genre_id in genre_ids:
            movie.genres.append(db.get(Genre, genre_id))
        db.add(movie)
        db.commit()
        db.refresh(movie)
        return movie

    return _make
