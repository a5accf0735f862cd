import random

from muse.crud import pick_crud
from muse.recommender.picker import browse_candidates, pick_movie
from muse.schemas.movie_schema import PickFilters

from tests.helpers import COMEDY, HORROR


def test_limit_is_respected_and_nothing_is_recorded(db, make_movie):
    comedies = {make_movie(genre_ids=[COMEDY], year=2000 + i % 20).id for i in range(50)}
    make_movie(genre_ids=[HORROR])

    movies = browse_candidates(db, PickFilters(genreIds=[COMEDY]), limit=5, rng=random.Random(4))

    ids = [m.id for m in movies]
    assert len(ids) == 5
    assert len(set(ids)) == 5
    assert set(ids) <= comedies
    assert all("Comedy" in m.genres for m in movies)
    assert pick_crud.count_picks(db) == 0


def test_limit_larger_than_pool(db, make_movie):
    for _ in range(3):
        make_movie()
    assert len(browse_candidates(db, PickFilters(), limit=30)) == 3


def test_empty_pool(db, make_movie):
    make_movie(year=1985)
    assert browse_candidates(db, PickFilters(era="2020-now")) == []


def test_session_history_and_client_exclusions_are_combined(db, make_movie):
    movies = [make_movie() for _ in range(4)]
    shown = pick_movie(db, "s", rng=random.Random(0))
    archived = next(m for m in movies if m.id != shown.id)

    result = browse_candidates(db, PickFilters(), session_id="s", exclude_movie_ids=[archived.id])

    ids = {m.id for m in result}
    assert len(ids) == 2
    assert shown.id not in ids
    assert archived.id not in ids


def test_without_session_only_client_exclusions_apply(db, make_movie):
    movies = [make_movie() for _ in range(3)]
    pick_movie(db, "s", rng=random.Random(0))

    result = browse_candidates(db, PickFilters(), exclude_movie_ids=[movies[0].id])

    assert {m.id for m in result} == {movies[1].id, movies[2].id}


def test_order_is_a_seeded_shuffle(db, make_movie):
    for _ in range(20):
        make_movie()

    first = [m.id for m in browse_candidates(db, PickFilters(), limit=20, rng=random.Random(7))]
    again = [m.id for m in browse_candidates(db, PickFilters(), limit=20, rng=random.Random(7))]

    assert first == again
    assert first != sorted(first)
